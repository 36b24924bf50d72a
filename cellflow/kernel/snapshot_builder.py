from typing import List, Tuple
from cellflow.domain.models import CellState, GridSnapshot, SignalState
from cellflow.domain.state import SimulationState

Color = Tuple[int, int, int]

CELL_COLORS = {
    CellState.WALL: (125, 125, 125),
    CellState.ROAD: (255, 255, 255),
    CellState.CAR: (0, 0, 255),
}

LIGHT_COLORS = {
    SignalState.RED: (255, 0, 0),
    SignalState.GREEN: (0, 255, 0),
    SignalState.RED_TO_GREEN: (255, 255, 0),
    SignalState.GREEN_TO_RED: (255, 255, 0),
}

class SnapshotBuilder:
    def build(self, state: SimulationState) -> GridSnapshot:
        return GridSnapshot(
            cells=tuple(tuple(row) for row in state.grid.cells),
            signal=state.signal,
        )

def cell_color(cell: CellState, signal: SignalState) -> Color:
    if cell == CellState.TRAFFIC_LIGHT:
        return LIGHT_COLORS[signal]
    return CELL_COLORS[cell]

def color_grid(snapshot: GridSnapshot) -> List[List[Color]]:
    return [[cell_color(cell, snapshot.signal) for cell in row] for row in snapshot.cells]
