"""Contract offers, scoring and player decisions."""

from dynasty.core.contracts.offer import (
    ContractEvaluationContext,
    ContractOffer,
    IncentiveType,
    InvalidContextError,
    MarketConditions,
    PerformanceIncentive,
    SeasonStage,
)
from dynasty.core.contracts.decision import (
    DEFAULT_DECISION_CONFIG,
    Decision,
    DecisionConfig,
    PlayerDecision,
    apply_hidden_sliders,
    apply_market_dynamics,
    build_counter_offer,
    calculate_base_score,
    determine_decision,
    evaluate_contract_offer,
    get_extension_terms,
    get_reporting_delay_if_unhappy,
    get_trade_deadline_behavior,
    score_offer,
    would_require_extension_on_trade,
)

__all__ = [
    "ContractOffer",
    "ContractEvaluationContext",
    "IncentiveType",
    "InvalidContextError",
    "MarketConditions",
    "PerformanceIncentive",
    "SeasonStage",
    "DEFAULT_DECISION_CONFIG",
    "Decision",
    "DecisionConfig",
    "PlayerDecision",
    "apply_hidden_sliders",
    "apply_market_dynamics",
    "build_counter_offer",
    "calculate_base_score",
    "determine_decision",
    "evaluate_contract_offer",
    "get_extension_terms",
    "get_reporting_delay_if_unhappy",
    "get_trade_deadline_behavior",
    "score_offer",
    "would_require_extension_on_trade",
]
