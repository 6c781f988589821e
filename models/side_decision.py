from dataclasses import dataclass
from typing import Optional

PHASE_IDLE = "IDLE"
PHASE_CHOOSE = "CHOOSE"
PHASE_FLIPPING = "FLIPPING"
PHASE_RESULT = "RESULT"
PHASE_COMPLETE = "COMPLETE"

PHASE_ORDER = [PHASE_IDLE, PHASE_CHOOSE, PHASE_FLIPPING, PHASE_RESULT, PHASE_COMPLETE]

HEADS = "heads"
TAILS = "tails"
COIN_FACES = (HEADS, TAILS)

ATTACK = "attack"
DEFENSE = "defense"
SIDES = (ATTACK, DEFENSE)

SIDE_MODE_TOSS = "toss"
SIDE_MODE_DRAW = "draw"
SIDE_MODES = (SIDE_MODE_TOSS, SIDE_MODE_DRAW)


@dataclass
class SideDecisionState:
    """
    Coin toss state for one pair of teams.

    ``outcome`` is fixed as soon as the coin is flipped; ``revealed_outcome``
    stays empty until the flip delay is over.
    """

    phase: str = PHASE_IDLE
    side_mode: str = SIDE_MODE_TOSS
    call: Optional[str] = None
    outcome: Optional[str] = None
    drawn_team: Optional[int] = None
    draw_for: str = ATTACK
    toss_winner: Optional[int] = None
    chosen_side: Optional[str] = None
    attacking_team: Optional[int] = None
    reveal_at: Optional[float] = None

    @property
    def revealed_outcome(self) -> Optional[str]:
        if PHASE_ORDER.index(self.phase) < PHASE_ORDER.index(PHASE_RESULT):
            return None
        return self.outcome

    @property
    def defending_team(self) -> Optional[int]:
        if self.attacking_team is None:
            return None
        return 2 if self.attacking_team == 1 else 1

    @property
    def is_active(self) -> bool:
        return self.phase not in (PHASE_IDLE, PHASE_COMPLETE)
