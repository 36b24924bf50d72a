from pydantic import BaseModel, ConfigDict
from cellflow.domain.grid import Grid
from cellflow.domain.models import SignalState, ControllerMode

class SimulationState(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    grid: Grid
    signal: SignalState = SignalState.RED
    mode: ControllerMode = ControllerMode.ADAPTIVE
    power: float
    threshold: float

    iterations_in_state: int = 0
    overall_time: int = 0
    time_delay: int = 0
    stopped: bool = False
