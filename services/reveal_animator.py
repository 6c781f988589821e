import logging
import random

from models.draft import FULL_TURN, DraftConfig, SpinState


def ease_out_cubic(progress: float) -> float:
    return 1 - (1 - progress) ** 3


class RevealAnimator:
    """
    Spins the wheel pointer towards a random segment for a single pick.

    The animator never sleeps: every call takes the current time in
    milliseconds and the caller decides how often to tick. Time spent paused
    is excluded from the elapsed time, so a pick always lasts ``duration``
    milliseconds of unpaused time no matter how often it was paused.
    """

    def __init__(self, spin: SpinState, config: DraftConfig, rng: random.Random):
        self.spin = spin
        self.config = config
        self.rng = rng
        self.picked = None
        self.logger = logging.getLogger(__name__)

    @property
    def is_spinning(self) -> bool:
        return self.spin.target_index is not None and self.picked is None

    def begin(self, now: float) -> str | None:
        """
        Start a pick over the current pool.

        Returns the player straight away when only one is left, otherwise
        ``None`` and the result comes from :meth:`advance`.
        """
        spin = self.spin
        spin.start_position = spin.position
        spin.paused_total = 0.0
        spin.paused_at = None
        spin.is_paused = False
        spin.start_time = now
        self.picked = None

        if len(spin.pool) == 1:
            spin.target_index = 0
            spin.target_position = spin.position
            spin.duration = 0.0
            self.picked = spin.pool[0]
            return self.picked

        segment = spin.segment_width
        spin.target_index = self.rng.randrange(len(spin.pool))
        full_turns = self.rng.randint(self.config.min_spins, self.config.max_spins)
        landing = self.rng.uniform(self.config.landing_min, self.config.landing_max)
        spin.target_position = (
            spin.start_position
            + full_turns * FULL_TURN
            + spin.target_index * segment
            + landing * segment
        )
        spin.duration = self.rng.uniform(
            self.config.min_duration_ms, self.config.max_duration_ms
        )
        self.logger.debug(
            "Spin over %d players: %d turns to segment %d in %.0fms",
            len(spin.pool),
            full_turns,
            spin.target_index,
            spin.duration,
        )
        return None

    def elapsed(self, now: float) -> float:
        spin = self.spin
        paused = spin.paused_total
        if spin.is_paused and spin.paused_at is not None:
            paused += now - spin.paused_at
        return now - spin.start_time - paused

    def progress(self, now: float) -> float:
        if self.spin.duration <= 0:
            return 1.0
        return min(max(self.elapsed(now) / self.spin.duration, 0.0), 1.0)

    def advance(self, now: float) -> str | None:
        """Move the pointer; returns the picked player on the final frame only"""
        if not self.is_spinning or self.spin.is_paused:
            return None

        spin = self.spin
        progress = self.progress(now)
        distance = spin.target_position - spin.start_position
        spin.position = spin.start_position + distance * ease_out_cubic(progress)

        if progress < 1:
            return None

        spin.position = spin.target_position
        self.picked = self.occupant_at(spin.target_position)
        return self.picked

    def occupant_at(self, position: float) -> str:
        """Player whose segment sits under the pointer at the top (0 degrees)"""
        angle = position % FULL_TURN
        index = int(angle // self.spin.segment_width) % len(self.spin.pool)
        return self.spin.pool[index]

    def highlighted(self) -> str | None:
        if not self.spin.pool:
            return None
        return self.occupant_at(self.spin.position)

    def pause(self, now: float) -> bool:
        if not self.is_spinning or self.spin.is_paused:
            return False
        self.spin.is_paused = True
        self.spin.paused_at = now
        return True

    def resume(self, now: float) -> bool:
        if not self.spin.is_paused:
            return False
        self.spin.paused_total += now - self.spin.paused_at
        self.spin.paused_at = None
        self.spin.is_paused = False
        return True

    def remove(self, player: str) -> None:
        """Take a picked player off the wheel and snap back to a segment boundary"""
        spin = self.spin
        if player in spin.pool:
            spin.pool.remove(player)
        spin.position -= spin.position % FULL_TURN
        spin.start_position = spin.position
        spin.target_position = spin.position
        spin.target_index = None
        self.picked = None
