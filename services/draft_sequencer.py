import logging
import random
from typing import Callable

from models.draft import DraftConfig, DraftContext, SpinState
from services.reveal_animator import RevealAnimator
from services.shuffler import shuffle
from services.team_partitioner import balanced_team_for

PHASE_SPINNING = "SPINNING"
PHASE_HOLDING = "HOLDING"
PHASE_SETTLING = "SETTLING"
PHASE_COMPLETE = "COMPLETE"


class DraftSequencer:
    """
    Runs a wheel draft one pick at a time.

    Each phase has a single deadline that is checked on :meth:`tick`:
    SPINNING until the animator lands, HOLDING while the pick is shown,
    SETTLING for the short pause before the next spin. Teams are built in
    reveal order, so the incremental balanced rule decides membership.
    """

    def __init__(
        self,
        roster: list[str],
        config: DraftConfig,
        rng: random.Random,
        emit: Callable[[str, dict], None],
    ):
        self.config = config
        self.rng = rng
        self.emit = emit
        self.context = DraftContext()
        self.spin = SpinState(pool=shuffle(roster, rng))
        self.total_players = len(self.spin.pool)
        self.animator = RevealAnimator(self.spin, config, rng)
        self.phase = None
        self.deadline = None
        self.logger = logging.getLogger(__name__)

    @property
    def is_complete(self) -> bool:
        return self.phase == PHASE_COMPLETE

    @property
    def is_paused(self) -> bool:
        return self.spin.is_paused

    @property
    def remaining(self) -> list[str]:
        return list(self.spin.pool)

    def start(self, now: float) -> None:
        self.logger.info("Starting wheel draft with %d players", self.total_players)
        self._begin_pick(now)

    def tick(self, now: float) -> None:
        if self.phase == PHASE_SPINNING:
            picked = self.animator.advance(now)
            if not self.spin.is_paused:
                self.emit(
                    "pick_progress",
                    {
                        "position": self.spin.position,
                        "picked_so_far": self.context.picked_count,
                        "highlighted": self.animator.highlighted(),
                        "progress": self.animator.progress(now),
                    },
                )
            if picked is not None:
                self._resolve(picked, now)

        elif self.phase == PHASE_HOLDING and now >= self.deadline:
            self.animator.remove(self.context.last_pick)
            if not self.spin.pool:
                self._complete()
                return
            self.phase = PHASE_SETTLING
            self.deadline = now + self.rng.uniform(
                self.config.min_gap_ms, self.config.max_gap_ms
            )

        elif self.phase == PHASE_SETTLING and now >= self.deadline:
            self._begin_pick(now)

    def pause(self, now: float) -> bool:
        if self.phase != PHASE_SPINNING:
            return False
        return self.animator.pause(now)

    def resume(self, now: float) -> bool:
        return self.animator.resume(now)

    def _begin_pick(self, now: float) -> None:
        self.phase = PHASE_SPINNING
        self.deadline = None
        self.emit(
            "pick_started",
            {
                "pool": self.remaining,
                "pick_number": self.context.picked_count + 1,
                "total": self.total_players,
            },
        )
        picked = self.animator.begin(now)
        if picked is not None:
            self._resolve(picked, now)

    def _resolve(self, player: str, now: float) -> None:
        team = balanced_team_for(len(self.context.team1), len(self.context.team2))
        self.context.assign(player, team)
        self.logger.info(
            "Pick %d/%d: %s -> Team %d",
            self.context.picked_count,
            self.total_players,
            player,
            team,
        )
        self.emit(
            "pick_resolved",
            {
                "player": player,
                "team": team,
                "assignments": dict(self.context.assignments),
            },
        )
        self.phase = PHASE_HOLDING
        self.deadline = now + self.rng.uniform(
            self.config.min_hold_ms, self.config.max_hold_ms
        )

    def _complete(self) -> None:
        self.phase = PHASE_COMPLETE
        self.deadline = None
        team1, team2 = list(self.context.team1), list(self.context.team2)
        self.emit("teams_ready", {"team1": team1, "team2": team2})
        self.emit("draft_complete", {"mode": "sequential"})
