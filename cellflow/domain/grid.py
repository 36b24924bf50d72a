import random
from typing import List, Tuple

from cellflow.domain import config
from cellflow.domain.errors import InvalidConfiguration
from cellflow.domain.models import CellState, Vector2, ZERO, HORIZONTAL, VERTICAL

Cell = Tuple[int, int]


class Grid:
    """Cell tags plus the direction, velocity and permission fields.

    All four layers share the same ``height x width`` shape. Vectors are
    immutable, so a field entry is updated by replacing it.
    """

    def __init__(self, height: int, width: int):
        self.height = height
        self.width = width
        self.cells: List[List[CellState]] = [[CellState.WALL] * width for _ in range(height)]
        self.directions: List[List[Vector2]] = [[ZERO] * width for _ in range(height)]
        self.velocities: List[List[Vector2]] = [[ZERO] * width for _ in range(height)]
        self.permissions: List[List[Vector2]] = [[ZERO] * width for _ in range(height)]

    @classmethod
    def from_viewport(cls, height_px: int = config.VIEWPORT_HEIGHT, width_px: int = config.VIEWPORT_WIDTH) -> "Grid":
        return cls(height_px // config.SCALE, width_px // config.SCALE)

    # Layout

    @property
    def crossing_rows(self) -> range:
        return range(self.height // 2 - 1, self.height // 2 + 1)

    @property
    def crossing_cols(self) -> range:
        return range(self.width // 2 - 1, self.width // 2 + 1)

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.height and 0 <= col < self.width

    def cells_of(self, state: CellState) -> List[Cell]:
        return [
            (y, x)
            for y in range(self.height)
            for x in range(self.width)
            if self.cells[y][x] == state
        ]

    def road_cell_count(self) -> int:
        return len(self.cells_of(CellState.ROAD)) + len(self.cells_of(CellState.CAR))

    def car_count(self) -> int:
        return len(self.cells_of(CellState.CAR))

    def has_cars(self) -> bool:
        return any(CellState.CAR in row for row in self.cells)

    def permitted_direction(self, row: int, col: int) -> Vector2:
        direction = self.directions[row][col]
        permission = self.permissions[row][col]
        return Vector2(row=direction.row * permission.row, col=direction.col * permission.col)

    def set_crossing_permission(self, permission: Vector2):
        for y in self.crossing_rows:
            for x in self.crossing_cols:
                self.permissions[y][x] = permission

    def place_car(self, row: int, col: int, speed: int):
        if self.cells[row][col] != CellState.ROAD:
            raise InvalidConfiguration(f"cell ({row}, {col}) is not a free road cell")
        # Permitted rather than raw direction: on the crossing this picks the
        # open axis so no car starts moving diagonally.
        heading = self.permitted_direction(row, col)
        self.cells[row][col] = CellState.CAR
        self.velocities[row][col] = Vector2(row=heading.row * speed, col=heading.col * speed)

    def next_buffer(self) -> "Grid":
        # Cars become road and velocities are zeroed. Directions are shared
        # since they never change; permissions are copied so a later signal
        # switch leaves this grid untouched.
        nxt = Grid.__new__(Grid)
        nxt.height = self.height
        nxt.width = self.width
        nxt.cells = [
            [CellState.ROAD if cell == CellState.CAR else cell for cell in row]
            for row in self.cells
        ]
        nxt.directions = self.directions
        nxt.permissions = [row[:] for row in self.permissions]
        nxt.velocities = [[ZERO] * self.width for _ in range(self.height)]
        return nxt


def _fill_road_horizontal(grid: Grid):
    for y in grid.crossing_rows:
        sign = 1 if y < grid.height // 2 else -1
        for x in range(grid.width):
            grid.cells[y][x] = CellState.ROAD
            grid.directions[y][x] = Vector2(row=grid.directions[y][x].row, col=sign)
            grid.permissions[y][x] = HORIZONTAL


def _fill_road_vertical(grid: Grid):
    for y in range(grid.height):
        for x in grid.crossing_cols:
            sign = -1 if x < grid.width // 2 else 1
            grid.cells[y][x] = CellState.ROAD
            grid.directions[y][x] = Vector2(row=sign, col=grid.directions[y][x].col)
            grid.permissions[y][x] = VERTICAL


def _fill_traffic_light(grid: Grid):
    for y in range(grid.height // 2 - 3, grid.height // 2 - 1):
        for x in range(grid.width // 2 - 3, grid.width // 2 - 1):
            grid.cells[y][x] = CellState.TRAFFIC_LIGHT


def _fill_cars(grid: Grid, total_cars: int, rng: random.Random):
    pool = grid.cells_of(CellState.ROAD)
    if total_cars > len(pool):
        raise InvalidConfiguration(
            f"{total_cars} cars requested but the road has only {len(pool)} cells"
        )

    for _ in range(total_cars):
        index = rng.randrange(len(pool))
        y, x = pool[index]
        pool[index] = pool[-1]
        pool.pop()
        grid.place_car(y, x, rng.randint(1, config.V_MAX))


def build(rows: int, cols: int, total_cars: int, seed: int) -> Grid:
    """Lay out the crossroad and scatter ``total_cars`` cars on it.

    Raises InvalidConfiguration when the grid is too small for the layout,
    the car count is negative, or there are more cars than road cells.
    """
    if rows < config.MIN_GRID_SIZE or cols < config.MIN_GRID_SIZE:
        raise InvalidConfiguration(
            f"grid {rows}x{cols} is smaller than {config.MIN_GRID_SIZE}x{config.MIN_GRID_SIZE}"
        )
    if total_cars < 0:
        raise InvalidConfiguration(f"car count must not be negative, got {total_cars}")

    grid = Grid(rows, cols)
    _fill_road_horizontal(grid)
    _fill_road_vertical(grid)
    _fill_traffic_light(grid)
    _fill_cars(grid, total_cars, random.Random(seed))
    return grid
