"""
Guard state machine gating discrete gesture classification.
"""
import logging

from .config import Cfg
from .state import EngineState
from .types import GuardState


logger = logging.getLogger(__name__)


class GuardEvaluator:
    """
    Decides each frame whether tilt/flick/swipe classification may run.

    IDLE -> CLOSED / OPEN_BLOCKED / OPEN_ACTIVE depending on hand openness,
    facing direction and the global cooldown. Entering CLOSED or OPEN_BLOCKED
    drops the rotation and flick baselines so classification resumes from a
    fresh frame.
    """

    def __init__(self, cfg: Cfg):
        self.cfg = cfg

    def cooldown_elapsed(self, state: EngineState, t_now: float) -> bool:
        if state.last_gesture_time is None:
            return True
        elapsed_ms = (t_now - state.last_gesture_time) * 1000.0
        return elapsed_ms >= self.cfg.guard.cooldown_ms

    def update(self, state: EngineState, hand_present: bool, hand_open: bool,
               is_facing_camera: bool, t_now: float) -> GuardState:
        """
        Advance the guard for this frame and store the result in ``state.guard``.

        Args:
            state: Engine history
            hand_present: Whether the frame contains a hand
            hand_open: Result of the open-hand predicate
            is_facing_camera: Orientation facing flag
            t_now: Current timestamp in seconds

        Returns:
            The new guard state
        """
        if not hand_present:
            new_state = GuardState.IDLE
        elif not hand_open:
            new_state = GuardState.CLOSED
        elif not is_facing_camera or not self.cooldown_elapsed(state, t_now):
            new_state = GuardState.OPEN_BLOCKED
        else:
            new_state = GuardState.OPEN_ACTIVE

        if new_state != state.guard:
            logger.debug("Guard %s -> %s", state.guard.value, new_state.value)
            if new_state in (GuardState.CLOSED, GuardState.OPEN_BLOCKED):
                state.clear_motion_history()

        state.guard = new_state
        return new_state
