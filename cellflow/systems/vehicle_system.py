"""Nagel-Schreckenberg movement rules on the crossroad grid.

One iteration is ``accelerate``, ``decelerate`` and then ``move``. The first
two update velocities in place; ``move`` builds the next grid.
"""

import sys
from typing import Tuple

from cellflow.domain import config
from cellflow.domain.errors import InvariantViolation
from cellflow.domain.grid import Grid
from cellflow.domain.models import CellState, Vector2

# Returned when the ray leaves the grid without meeting an obstacle.
UNBOUNDED = sys.maxsize


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def _speed_up(component: int, heading: int) -> int:
    if heading > 0 and abs(component) < config.V_MAX:
        return component + 1
    if heading < 0 and abs(component) < config.V_MAX:
        return component - 1
    return component


def accelerate(grid: Grid):
    for y in range(grid.height):
        for x in range(grid.width):
            if grid.cells[y][x] != CellState.CAR:
                continue
            heading = grid.permitted_direction(y, x)
            velocity = grid.velocities[y][x]
            grid.velocities[y][x] = Vector2(
                row=_speed_up(velocity.row, heading.row),
                col=_speed_up(velocity.col, heading.col),
            )


def obstacle_distance(grid: Grid, row: int, col: int) -> int:
    """Count free road cells ahead of the car at ``(row, col)``.

    The ray advances by the sign of each velocity component. It stops at a
    cell that is not road, or at a cell that forbids an axis the car's own
    cell allows (a red light). Leaving the grid yields ``UNBOUNDED``.
    """
    velocity = grid.velocities[row][col]
    step_y = _sign(velocity.row)
    step_x = _sign(velocity.col)
    if step_y == 0 and step_x == 0:
        return 0

    own = grid.permissions[row][col]
    y, x = row, col
    distance = -1
    while True:
        y += step_y
        x += step_x
        distance += 1

        if not grid.in_bounds(y, x):
            return UNBOUNDED

        ahead = grid.permissions[y][x]
        if step_y != 0 and own.row != 0 and ahead.row == 0:
            return distance
        if step_x != 0 and own.col != 0 and ahead.col == 0:
            return distance
        if grid.cells[y][x] != CellState.ROAD:
            return distance


def _check_heading(grid: Grid, row: int, col: int):
    direction = grid.directions[row][col]
    velocity = grid.velocities[row][col]
    if velocity.row != 0 and _sign(velocity.row) != direction.row:
        raise InvariantViolation(
            f"car at ({row}, {col}) has row velocity {velocity.row} against direction {direction.row}"
        )
    if velocity.col != 0 and _sign(velocity.col) != direction.col:
        raise InvariantViolation(
            f"car at ({row}, {col}) has col velocity {velocity.col} against direction {direction.col}"
        )


def decelerate(grid: Grid):
    for y in range(grid.height):
        for x in range(grid.width):
            if grid.cells[y][x] != CellState.CAR:
                continue
            _check_heading(grid, y, x)

            direction = grid.directions[y][x]
            velocity = grid.velocities[y][x]
            distance = obstacle_distance(grid, y, x)

            # Only the first branch that needs clamping applies.
            if direction.row > 0 and velocity.row > distance:
                grid.velocities[y][x] = Vector2(row=distance, col=velocity.col)
            elif direction.row < 0 and velocity.row < -distance:
                grid.velocities[y][x] = Vector2(row=-distance, col=velocity.col)
            elif direction.col > 0 and velocity.col > distance:
                grid.velocities[y][x] = Vector2(row=velocity.row, col=distance)
            elif direction.col < 0 and velocity.col < -distance:
                grid.velocities[y][x] = Vector2(row=velocity.row, col=-distance)


def move(grid: Grid) -> Tuple[Grid, int]:
    """Relocate every car by its velocity into a fresh grid.

    Returns the next grid and the number of cars that stood still. Every
    write goes to the new buffer, so the order in which cars are visited
    cannot matter. Cars whose destination is off the grid leave the road.
    Two cars landing on the same cell keep the later write.
    """
    nxt = grid.next_buffer()
    stalled = 0

    for y in range(grid.height):
        for x in range(grid.width):
            if grid.cells[y][x] != CellState.CAR:
                continue
            velocity = grid.velocities[y][x]
            if velocity.row == 0 and velocity.col == 0:
                stalled += 1

            ty = y + velocity.row
            tx = x + velocity.col
            if nxt.in_bounds(ty, tx):
                nxt.cells[ty][tx] = CellState.CAR
                nxt.velocities[ty][tx] = velocity

    return nxt, stalled
