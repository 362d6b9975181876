"""Football positions as they appear on player records."""

from enum import Enum


class Position(Enum):
    """Roster position of a player."""

    # Offense
    QB = "QB"
    RB = "RB"
    FB = "FB"
    WR = "WR"
    TE = "TE"
    LT = "LT"
    LG = "LG"
    C = "C"
    RG = "RG"
    RT = "RT"

    # Defense
    DE = "DE"
    DT = "DT"
    NT = "NT"
    MLB = "MLB"
    OLB = "OLB"
    ILB = "ILB"
    CB = "CB"
    FS = "FS"
    SS = "SS"

    # Special teams
    K = "K"
    P = "P"
    LS = "LS"

    @property
    def is_lineman(self) -> bool:
        """Offensive or defensive line. Linemen draw no endorsement interest."""
        return self.category in ("OL", "DL")

    @property
    def category(self) -> str:
        """
        Market category used for position-driven personality and market rules.

        QB, RB, WR and TE map to themselves; everything else collapses
        into OL, DL, LB, DB or K.
        """
        return POSITION_CATEGORY_MAP.get(self, self.value)


POSITION_CATEGORY_MAP = {
    Position.FB: "RB",
    Position.LT: "OL",
    Position.LG: "OL",
    Position.C: "OL",
    Position.RG: "OL",
    Position.RT: "OL",
    Position.DE: "DL",
    Position.DT: "DL",
    Position.NT: "DL",
    Position.MLB: "LB",
    Position.OLB: "LB",
    Position.ILB: "LB",
    Position.CB: "DB",
    Position.FS: "DB",
    Position.SS: "DB",
    Position.P: "K",
    Position.LS: "K",
}
