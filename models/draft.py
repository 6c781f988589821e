from dataclasses import dataclass, field
from typing import Dict, List, Optional

TEAM_1 = 1
TEAM_2 = 2

DRAW_INSTANT = "instant"
DRAW_SEQUENTIAL = "sequential"
DRAW_MODE_ALIASES = {
    "instant": DRAW_INSTANT,
    "sequential": DRAW_SEQUENTIAL,
    "wheel": DRAW_SEQUENTIAL,
}

FULL_TURN = 360.0


def other_team(team: int) -> int:
    return TEAM_2 if team == TEAM_1 else TEAM_1


@dataclass
class DraftConfig:
    max_players: int = 10
    min_spins: int = 3
    max_spins: int = 7
    landing_min: float = 0.3
    landing_max: float = 0.7
    min_duration_ms: float = 3000
    max_duration_ms: float = 5000
    min_hold_ms: float = 600
    max_hold_ms: float = 800
    min_gap_ms: float = 300
    max_gap_ms: float = 600
    min_flip_ms: float = 3000
    max_flip_ms: float = 4000
    tick_interval_ms: float = 50


@dataclass
class SpinState:
    """Wheel state for the pick currently being revealed"""

    pool: List[str]
    position: float = 0.0
    start_position: float = 0.0
    target_position: float = 0.0
    target_index: Optional[int] = None
    start_time: float = 0.0
    duration: float = 0.0
    paused_total: float = 0.0
    paused_at: Optional[float] = None
    is_paused: bool = False

    @property
    def segment_width(self) -> float:
        return FULL_TURN / len(self.pool)


@dataclass
class DraftContext:
    """Teams being built during one draft, in reveal order"""

    team1: List[str] = field(default_factory=list)
    team2: List[str] = field(default_factory=list)
    assignments: Dict[str, int] = field(default_factory=dict)
    last_pick: Optional[str] = None

    def assign(self, player: str, team: int) -> None:
        if team == TEAM_1:
            self.team1.append(player)
        else:
            self.team2.append(player)
        self.assignments[player] = team
        self.last_pick = player

    @property
    def picked_count(self) -> int:
        return len(self.assignments)
