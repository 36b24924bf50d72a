from cellflow.controllers.base import Controller
from cellflow.domain.errors import InvariantViolation
from cellflow.domain.models import SignalState, Vector2, ZERO, HORIZONTAL, VERTICAL
from cellflow.domain.state import SimulationState

# Cycle: RED -> RED_TO_GREEN -> GREEN -> GREEN_TO_RED -> RED
NEXT_SIGNAL = {
    SignalState.RED: SignalState.RED_TO_GREEN,
    SignalState.RED_TO_GREEN: SignalState.GREEN,
    SignalState.GREEN: SignalState.GREEN_TO_RED,
    SignalState.GREEN_TO_RED: SignalState.RED,
}

CROSSING_PERMISSION = {
    SignalState.RED: VERTICAL,
    SignalState.RED_TO_GREEN: ZERO,
    SignalState.GREEN: HORIZONTAL,
    SignalState.GREEN_TO_RED: ZERO,
}

class SignalSystem:
    def __init__(self, controller: Controller):
        self.controller = controller

    def update(self, state: SimulationState) -> bool:
        """Advance the light if the controller says so. Returns True on a switch."""
        if not self.controller.should_advance(state.signal, state.iterations_in_state, state.grid):
            return False
        self._switch_signal_phase(state)
        return True

    def _switch_signal_phase(self, state: SimulationState):
        if state.signal not in NEXT_SIGNAL:
            raise InvariantViolation(f"unknown signal state {state.signal!r}")
        state.signal = NEXT_SIGNAL[state.signal]
        state.iterations_in_state = 0
        state.grid.set_crossing_permission(permission_for(state.signal))


def permission_for(signal: SignalState) -> Vector2:
    return CROSSING_PERMISSION[signal]
