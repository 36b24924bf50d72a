from abc import ABC, abstractmethod
from cellflow.domain import config
from cellflow.domain.grid import Grid
from cellflow.domain.models import SignalState

TRANSITIONAL = (SignalState.RED_TO_GREEN, SignalState.GREEN_TO_RED)

class Controller(ABC):
    def should_advance(self, signal: SignalState, iterations_in_state: int, grid: Grid) -> bool:
        # Orange phases last a fixed number of iterations in every mode.
        if signal in TRANSITIONAL:
            return iterations_in_state >= config.TIME_ORANGE
        return self.should_leave(signal, iterations_in_state, grid)

    @abstractmethod
    def should_leave(self, signal: SignalState, iterations_in_state: int, grid: Grid) -> bool:
        """Decide whether a stable RED or GREEN phase should end now."""
