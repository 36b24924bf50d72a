from typing import Tuple
from cellflow.controllers.base import Controller
from cellflow.domain import config
from cellflow.domain.errors import InvariantViolation
from cellflow.domain.grid import Grid
from cellflow.domain.models import CellState, ControllerMode, SignalState

class FixedController(Controller):
    """Classic cycle: each stable phase holds for TIME_STABLE iterations."""

    def should_leave(self, signal: SignalState, iterations_in_state: int, grid: Grid) -> bool:
        return iterations_in_state >= config.TIME_STABLE


def approach_pressure(grid: Grid, power: float) -> Tuple[float, float]:
    """Return ``(fh, fv)``, the weighted queues on the two axes.

    Each car on an approach lane contributes ``(1 / d) ** power`` where ``d``
    is its distance in cells to the crossing (1 on the stop line).
    """
    h, w = grid.height, grid.width
    cells = grid.cells
    fh = 0.0
    fv = 0.0

    # Eastbound on the upper row, westbound on the lower row
    for x in range(0, w // 2 - 1):
        if cells[h // 2 - 1][x] == CellState.CAR:
            fh += (1.0 / ((w // 2 - 1) - x)) ** power
    for x in range(w // 2 + 1, w):
        if cells[h // 2][x] == CellState.CAR:
            fh += (1.0 / (x - w // 2)) ** power

    # Southbound on the right column, northbound on the left column
    for y in range(0, h // 2 - 1):
        if cells[y][w // 2] == CellState.CAR:
            fv += (1.0 / ((h // 2 - 1) - y)) ** power
    for y in range(h // 2 + 1, h):
        if cells[y][w // 2 - 1] == CellState.CAR:
            fv += (1.0 / (y - h // 2)) ** power

    return fh, fv


def ratio_exceeds(numerator: float, denominator: float, threshold: float) -> bool:
    if denominator == 0:
        # Pressure on one side only counts as infinite; no pressure at all never switches.
        return numerator > 0
    return numerator / denominator > threshold


class AdaptiveController(Controller):
    """Switches a stable phase once the waiting side outweighs the flowing side."""

    def __init__(self, power: float, threshold: float):
        self.power = power
        self.threshold = threshold

    def should_leave(self, signal: SignalState, iterations_in_state: int, grid: Grid) -> bool:
        fh, fv = approach_pressure(grid, self.power)
        if signal == SignalState.RED:
            return ratio_exceeds(fh, fv, self.threshold)
        if signal == SignalState.GREEN:
            return ratio_exceeds(fv, fh, self.threshold)
        raise InvariantViolation(f"no stable-phase rule for signal {signal}")


def make_controller(mode: ControllerMode, power: float, threshold: float) -> Controller:
    if mode == ControllerMode.CLASSIC:
        return FixedController()
    return AdaptiveController(power, threshold)
