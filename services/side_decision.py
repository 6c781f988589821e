import logging
import random
from typing import Callable

from models.draft import TEAM_1, TEAM_2, DraftConfig, other_team
from models.side_decision import (
    ATTACK,
    COIN_FACES,
    PHASE_CHOOSE,
    PHASE_COMPLETE,
    PHASE_FLIPPING,
    PHASE_IDLE,
    PHASE_RESULT,
    SIDE_MODE_DRAW,
    SIDE_MODE_TOSS,
    SIDE_MODES,
    SIDES,
    SideDecisionState,
)


class SideDecisionProtocol:
    """
    Decides which team starts on attack.

    In ``toss`` mode Team 1 calls heads or tails, the coin lands after a short
    delay and the winner picks a side. In ``draw`` mode a random team simply
    gets the preselected side once the flip delay is over.
    """

    def __init__(
        self,
        config: DraftConfig,
        rng: random.Random,
        emit: Callable[[str, dict], None],
    ):
        self.config = config
        self.rng = rng
        self.emit = emit
        self.state = SideDecisionState()
        self.logger = logging.getLogger(__name__)

    @property
    def phase(self) -> str:
        return self.state.phase

    def reset(self) -> None:
        self.state = SideDecisionState()

    def start(self, now: float, side_mode=SIDE_MODE_TOSS, draw_for=ATTACK) -> bool:
        if self.state.phase != PHASE_IDLE:
            return False
        if side_mode not in SIDE_MODES or draw_for not in SIDES:
            return False

        self.state = SideDecisionState(
            phase=PHASE_CHOOSE, side_mode=side_mode, draw_for=draw_for
        )
        self.emit(
            "side_decision_started", {"side_mode": side_mode, "draw_for": draw_for}
        )
        if side_mode == SIDE_MODE_DRAW:
            self._flip(now)
        return True

    def call(self, face: str, now: float) -> bool:
        """Team 1 calls the coin; the result is drawn right here"""
        state = self.state
        if state.phase != PHASE_CHOOSE or state.side_mode != SIDE_MODE_TOSS:
            return False
        if face not in COIN_FACES:
            return False
        state.call = face
        self._flip(now)
        return True

    def tick(self, now: float) -> None:
        state = self.state
        if state.phase == PHASE_FLIPPING and now >= state.reveal_at:
            self._reveal()

    def choose_side(self, team: int, side: str) -> bool:
        state = self.state
        if state.phase != PHASE_RESULT or state.side_mode != SIDE_MODE_TOSS:
            return False
        if team != state.toss_winner or side not in SIDES:
            return False
        self._complete(team, side)
        return True

    def _flip(self, now: float) -> None:
        state = self.state
        if state.side_mode == SIDE_MODE_TOSS:
            state.outcome = self.rng.choice(COIN_FACES)
        else:
            state.drawn_team = self.rng.choice((TEAM_1, TEAM_2))
        state.reveal_at = now + self.rng.uniform(
            self.config.min_flip_ms, self.config.max_flip_ms
        )
        state.phase = PHASE_FLIPPING
        self.emit("side_toss_started", {"call": state.call})

    def _reveal(self) -> None:
        state = self.state
        state.phase = PHASE_RESULT
        state.reveal_at = None
        if state.side_mode == SIDE_MODE_TOSS:
            state.toss_winner = TEAM_1 if state.outcome == state.call else TEAM_2
        else:
            state.toss_winner = state.drawn_team

        self.logger.info(
            "Side %s: call=%s outcome=%s winner=Team %d",
            state.side_mode,
            state.call,
            state.outcome,
            state.toss_winner,
        )
        self.emit(
            "side_toss_result",
            {"outcome": state.outcome, "winner": state.toss_winner},
        )

        if state.side_mode == SIDE_MODE_DRAW:
            self._complete(state.toss_winner, state.draw_for)

    def _complete(self, team: int, side: str) -> None:
        state = self.state
        state.chosen_side = side
        state.attacking_team = team if side == ATTACK else other_team(team)
        state.phase = PHASE_COMPLETE
        self.emit(
            "side_complete",
            {
                "attacking_team": state.attacking_team,
                "defending_team": state.defending_team,
            },
        )
