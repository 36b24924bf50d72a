from cellflow.controllers.implementations import make_controller
from cellflow.domain import grid as grid_builder
from cellflow.domain.errors import InvalidConfiguration
from cellflow.domain.grid import Grid
from cellflow.domain.models import ControllerMode, GridSnapshot, Metrics, SignalState
from cellflow.domain.state import SimulationState
from cellflow.kernel.snapshot_builder import SnapshotBuilder
from cellflow.systems import vehicle_system
from cellflow.systems.signal_system import SignalSystem

class Simulation:
    """One run of the crossroad automaton.

    Built once from its parameters and stepped until ``stopped``; a finished
    run is replaced, never reset. ``step`` is not safe for concurrent callers.
    """

    def __init__(
        self,
        total_cars: int,
        power: float,
        threshold: float,
        rows: int,
        cols: int,
        seed: int,
        mode: ControllerMode = ControllerMode.ADAPTIVE,
    ):
        if threshold <= 0:
            raise InvalidConfiguration(f"threshold must be positive, got {threshold}")
        grid = grid_builder.build(rows, cols, total_cars, seed)
        self.state = SimulationState(grid=grid, mode=mode, power=power, threshold=threshold)
        self.signal_system = SignalSystem(make_controller(mode, power, threshold))
        self.snapshot_builder = SnapshotBuilder()

    @property
    def grid(self) -> Grid:
        return self.state.grid

    @property
    def signal(self) -> SignalState:
        return self.state.signal

    @property
    def stopped(self) -> bool:
        return self.state.stopped

    def step(self):
        # 1. Physics
        vehicle_system.accelerate(self.state.grid)
        vehicle_system.decelerate(self.state.grid)
        self.state.grid, stalled = vehicle_system.move(self.state.grid)
        self.state.time_delay += stalled

        # 2. Signals
        self.state.iterations_in_state += 1
        self.signal_system.update(self.state)

        # 3. Metrics
        self.state.overall_time += 1
        if not self.state.grid.has_cars():
            self.state.stopped = True

    def snapshot(self) -> GridSnapshot:
        return self.snapshot_builder.build(self.state)

    def metrics(self) -> Metrics:
        return Metrics(
            overallTime=self.state.overall_time,
            timeDelay=self.state.time_delay,
            stopped=self.state.stopped,
        )
