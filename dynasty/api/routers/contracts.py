"""API Router for contract offer evaluation."""

from fastapi import APIRouter, HTTPException

from dynasty.api.schemas.contracts import DecisionResponse, EvaluateOfferRequest
from dynasty.api.services import engine_service
from dynasty.api.services.engine_service import MalformedPersonalityError
from dynasty.core.contracts import InvalidContextError

router = APIRouter(prefix="/contracts", tags=["contracts"])


@router.post("/evaluate", response_model=DecisionResponse)
async def evaluate_offer(request: EvaluateOfferRequest):
    """
    Evaluate an offer from the player's point of view.

    Returns the decision, the score breakdown, player-facing feedback and,
    for counters, the player's counter offer.
    """
    try:
        decision = engine_service.evaluate(request)
    except MalformedPersonalityError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except InvalidContextError as e:
        raise HTTPException(status_code=400, detail=str(e))

    data = decision.to_dict()
    data.pop("offer")
    return data
