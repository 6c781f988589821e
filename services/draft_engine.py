import logging
import random
import time
from typing import Callable, Optional

from models.draft import (
    DRAW_INSTANT,
    DRAW_MODE_ALIASES,
    DRAW_SEQUENTIAL,
    TEAM_1,
    TEAM_2,
    DraftConfig,
)
from models.roster import Roster
from models.side_decision import ATTACK, SIDE_MODE_TOSS, SideDecisionState
from services.draft_sequencer import DraftSequencer
from services.side_decision import SideDecisionProtocol
from services.team_partitioner import even_split

ROSTER_KEY = "players"
MAP_COUNT_KEY = "map-count"
MAP_COUNTS = (1, 3, 5)
DEFAULT_MAP_COUNT = 3


def monotonic_ms() -> float:
    return time.monotonic() * 1000


class DraftEngine:
    """
    Team draw state for one chat.

    Owns the roster, the current draft and the side decision. Nothing here
    waits: timers are deadlines checked by :meth:`tick`, which the caller runs
    periodically while :attr:`needs_ticks` is true. Every cancellation bumps
    :attr:`generation` so ticks scheduled for an older draft are ignored.

    Args:
        store: object with ``load(key, default)`` and ``save(key, value)``
        key_prefix: namespace for the stored keys (e.g. the chat id)
        config (DraftConfig): timing constants
        rng (random.Random): randomness source, seeded in tests
        clock: callable returning the current time in milliseconds
    """

    def __init__(
        self,
        store,
        key_prefix: str = "",
        config: Optional[DraftConfig] = None,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.store = store
        self.key_prefix = key_prefix
        self.config = config or DraftConfig()
        self.rng = rng or random.Random()
        self.clock = clock or monotonic_ms
        self.logger = logging.getLogger(__name__)
        self.listeners = []

        self.generation = 0
        self.team1 = []
        self.team2 = []
        self.last_mode = None
        self.sequencer = None
        self.side = SideDecisionProtocol(self.config, self.rng, self._emit)

        self.roster = Roster.from_stored(
            self.store.load(self._key(ROSTER_KEY), []),
            max_players=self.config.max_players,
        )
        stored_count = self.store.load(self._key(MAP_COUNT_KEY), DEFAULT_MAP_COUNT)
        self.map_count = (
            stored_count if stored_count in MAP_COUNTS else DEFAULT_MAP_COUNT
        )

    # Events

    def subscribe(self, listener: Callable[[str, dict], None]) -> None:
        self.listeners.append(listener)

    def _emit(self, event: str, payload: dict) -> None:
        if event == "teams_ready":
            self.team1 = list(payload["team1"])
            self.team2 = list(payload["team2"])
        for listener in list(self.listeners):
            listener(event, payload)

    # State

    @property
    def players(self) -> list[str]:
        return self.roster.names

    @property
    def is_drafting(self) -> bool:
        return self.sequencer is not None and not self.sequencer.is_complete

    @property
    def is_drawn(self) -> bool:
        return bool(self.team1 or self.team2) and not self.is_drafting

    @property
    def is_paused(self) -> bool:
        return self.is_drafting and self.sequencer.is_paused

    @property
    def assignments(self) -> dict:
        if self.sequencer is None:
            return {}
        return dict(self.sequencer.context.assignments)

    @property
    def side_state(self) -> SideDecisionState:
        return self.side.state

    @property
    def attacking_team(self) -> Optional[int]:
        return self.side.state.attacking_team

    @property
    def needs_ticks(self) -> bool:
        return self.is_drafting or self.side.state.reveal_at is not None

    # Roster

    def add_player(self, name: str) -> bool:
        if not self.roster.add(name):
            return False
        self._roster_changed()
        return True

    def add_players(self, text: str) -> list[str]:
        added = self.roster.add_bulk(text)
        if added:
            self._roster_changed()
        return added

    def remove_player(self, name: str) -> bool:
        if not self.roster.remove(name):
            return False
        self._roster_changed()
        return True

    def clear_roster(self) -> None:
        self.roster.clear()
        self._roster_changed()

    def _roster_changed(self) -> None:
        self.store.save(self._key(ROSTER_KEY), self.roster.names)
        self._cancel("roster changed")

    def set_map_count(self, count: int) -> bool:
        if count not in MAP_COUNTS:
            return False
        self.map_count = count
        self.store.save(self._key(MAP_COUNT_KEY), count)
        return True

    # Drawing

    def draw(self, mode: str = DRAW_INSTANT) -> bool:
        mode = DRAW_MODE_ALIASES.get(mode)
        if mode is None or len(self.roster) < 2:
            return False

        self._cancel("new draw")
        self.last_mode = mode

        if mode == DRAW_INSTANT:
            team1, team2 = even_split(self.roster.names, self.rng)
            self.logger.info("Instant draw: %d vs %d", len(team1), len(team2))
            self._emit("teams_ready", {"team1": team1, "team2": team2})
            self._emit("draft_complete", {"mode": DRAW_INSTANT})
            return True

        self.sequencer = DraftSequencer(
            self.roster.names, self.config, self.rng, self._emit
        )
        self.sequencer.start(self.clock())
        return True

    def pause(self) -> bool:
        if not self.is_drafting:
            return False
        return self.sequencer.pause(self.clock())

    def resume(self) -> bool:
        if not self.is_drafting:
            return False
        return self.sequencer.resume(self.clock())

    def toggle_pause(self) -> bool:
        """Returns the paused flag after toggling"""
        if self.is_paused:
            self.resume()
        else:
            self.pause()
        return self.is_paused

    def tick(self, now: Optional[float] = None, generation: Optional[int] = None):
        if generation is not None and generation != self.generation:
            return
        now = self.clock() if now is None else now
        if self.is_drafting:
            self.sequencer.tick(now)
        self.side.tick(now)

    # Side decision

    def start_side_decision(self, side_mode=SIDE_MODE_TOSS, draw_for=ATTACK) -> bool:
        if not self.is_drawn or self.side.state.is_active:
            return False
        self.side.reset()
        return self.side.start(self.clock(), side_mode=side_mode, draw_for=draw_for)

    def call_toss(self, face: str) -> bool:
        return self.side.call(face, self.clock())

    def choose_side(self, team: int, side: str) -> bool:
        if team not in (TEAM_1, TEAM_2):
            return False
        return self.side.choose_side(team, side)

    # Cancellation

    def reset(self) -> None:
        self._cancel("reset")

    def _cancel(self, reason: str) -> None:
        was_drafting = self.is_drafting
        self.generation += 1
        self.sequencer = None
        self.team1 = []
        self.team2 = []
        self.side.reset()
        if was_drafting:
            self.logger.info("Draft cancelled: %s", reason)
            self._emit("draft_cancelled", {"reason": reason})

    def _key(self, name: str) -> str:
        return f"{self.key_prefix}:{name}" if self.key_prefix else name
