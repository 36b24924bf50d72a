import unittest
from cellflow.domain import config
from cellflow.domain.errors import InvariantViolation
from cellflow.domain.grid import build
from cellflow.domain.models import CellState, Vector2, ZERO, HORIZONTAL
from cellflow.systems import vehicle_system
from cellflow.systems.vehicle_system import UNBOUNDED

class TestObstacleDistance(unittest.TestCase):
    def setUp(self):
        # 8x8, crossing rows/cols 3-4, light is RED (vertical only)
        self.grid = build(8, 8, 0, seed=0)

    def test_adjacent_car_gives_zero(self):
        self.grid.place_car(3, 1, 1)
        self.grid.place_car(3, 2, 1)
        self.assertEqual(vehicle_system.obstacle_distance(self.grid, 3, 1), 0)

    def test_adjacent_wall_gives_zero(self):
        self.grid.place_car(3, 0, 2)
        self.grid.cells[3][1] = CellState.WALL
        self.assertEqual(vehicle_system.obstacle_distance(self.grid, 3, 0), 0)

    def test_stops_before_red_crossing(self):
        self.grid.place_car(3, 0, 1)
        self.assertEqual(vehicle_system.obstacle_distance(self.grid, 3, 0), 2)

    def test_open_crossing_runs_to_edge(self):
        self.grid.set_crossing_permission(HORIZONTAL)
        self.grid.place_car(3, 0, 1)
        self.assertEqual(vehicle_system.obstacle_distance(self.grid, 3, 0), UNBOUNDED)

    def test_vertical_car_passes_on_red(self):
        self.grid.place_car(0, 4, 1)
        self.assertEqual(vehicle_system.obstacle_distance(self.grid, 0, 4), UNBOUNDED)
        self.grid.place_car(6, 4, 1)
        self.assertEqual(vehicle_system.obstacle_distance(self.grid, 0, 4), 5)

    def test_standing_car(self):
        self.grid.place_car(3, 0, 1)
        self.grid.velocities[3][0] = ZERO
        self.assertEqual(vehicle_system.obstacle_distance(self.grid, 3, 0), 0)


class TestAccelerate(unittest.TestCase):
    def setUp(self):
        self.grid = build(8, 8, 0, seed=0)

    def test_speeds_up_by_one(self):
        self.grid.place_car(3, 0, 1)
        self.grid.place_car(4, 7, 2)
        vehicle_system.accelerate(self.grid)
        self.assertEqual(self.grid.velocities[3][0], Vector2(row=0, col=2))
        self.assertEqual(self.grid.velocities[4][7], Vector2(row=0, col=-3))

    def test_capped_at_v_max(self):
        self.grid.place_car(0, 4, config.V_MAX)
        vehicle_system.accelerate(self.grid)
        self.assertEqual(self.grid.velocities[0][4], Vector2(row=config.V_MAX, col=0))

    def test_no_push_in_closed_crossing(self):
        self.grid.set_crossing_permission(ZERO)
        self.grid.cells[3][3] = CellState.CAR
        vehicle_system.accelerate(self.grid)
        self.assertEqual(self.grid.velocities[3][3], ZERO)

    def test_standing_car_in_crossing_turns_with_permission(self):
        self.grid.cells[3][3] = CellState.CAR
        vehicle_system.accelerate(self.grid)
        # RED: vertical axis, direction at (3, 3) is up
        self.assertEqual(self.grid.velocities[3][3], Vector2(row=-1, col=0))

    def test_ignores_empty_cells(self):
        vehicle_system.accelerate(self.grid)
        for row in self.grid.velocities:
            for v in row:
                self.assertEqual(v, ZERO)


class TestDecelerate(unittest.TestCase):
    def setUp(self):
        self.grid = build(8, 8, 0, seed=0)

    def test_clamps_to_distance(self):
        self.grid.place_car(3, 1, 4)
        vehicle_system.decelerate(self.grid)
        self.assertEqual(self.grid.velocities[3][1], Vector2(row=0, col=1))

    def test_clamps_negative_direction(self):
        self.grid.place_car(7, 3, 4)
        self.grid.place_car(5, 3, 1)
        vehicle_system.decelerate(self.grid)
        self.assertEqual(self.grid.velocities[7][3], Vector2(row=-1, col=0))

    def test_leaves_free_car_alone(self):
        self.grid.place_car(4, 2, 3)
        vehicle_system.decelerate(self.grid)
        self.assertEqual(self.grid.velocities[4][2], Vector2(row=0, col=-3))

    def test_velocity_against_direction_is_fatal(self):
        self.grid.place_car(3, 1, 1)
        self.grid.velocities[3][1] = Vector2(row=0, col=-1)
        with self.assertRaises(InvariantViolation):
            vehicle_system.decelerate(self.grid)


class TestMove(unittest.TestCase):
    def setUp(self):
        self.grid = build(8, 8, 0, seed=0)

    def test_moves_by_velocity(self):
        self.grid.place_car(3, 0, 2)
        nxt, stalled = vehicle_system.move(self.grid)
        self.assertEqual(stalled, 0)
        self.assertEqual(nxt.cells[3][0], CellState.ROAD)
        self.assertEqual(nxt.cells[3][2], CellState.CAR)
        self.assertEqual(nxt.velocities[3][2], Vector2(row=0, col=2))
        self.assertEqual(nxt.velocities[3][0], ZERO)

    def test_double_buffer_keeps_source(self):
        self.grid.place_car(3, 0, 1)
        self.grid.place_car(3, 1, 1)
        nxt, _ = vehicle_system.move(self.grid)
        self.assertEqual(self.grid.cells[3][0], CellState.CAR)
        self.assertEqual(nxt.cells[3][1], CellState.CAR)
        self.assertEqual(nxt.cells[3][2], CellState.CAR)
        self.assertEqual(nxt.car_count(), 2)

    def test_counts_stalled_cars(self):
        self.grid.place_car(3, 1, 1)
        self.grid.velocities[3][1] = ZERO
        nxt, stalled = vehicle_system.move(self.grid)
        self.assertEqual(stalled, 1)
        self.assertEqual(nxt.cells[3][1], CellState.CAR)

    def test_leaving_grid_removes_car(self):
        self.grid.place_car(3, 6, 3)
        nxt, _ = vehicle_system.move(self.grid)
        self.assertFalse(nxt.has_cars())

    def test_overlap_keeps_later_write(self):
        self.grid.place_car(3, 0, 2)
        self.grid.place_car(3, 1, 1)
        nxt, _ = vehicle_system.move(self.grid)
        self.assertEqual(nxt.car_count(), 1)
        self.assertEqual(nxt.velocities[3][2], Vector2(row=0, col=1))

    def test_next_buffer_keeps_old_permissions(self):
        nxt, _ = vehicle_system.move(self.grid)
        nxt.set_crossing_permission(ZERO)
        self.assertEqual(nxt.permissions[3][3], ZERO)
        self.assertEqual(self.grid.permissions[3][3], Vector2(row=1, col=0))

    def test_velocity_only_on_cars(self):
        grid = build(16, 16, 60, seed=9)
        vehicle_system.accelerate(grid)
        vehicle_system.decelerate(grid)
        nxt, _ = vehicle_system.move(grid)
        for y in range(16):
            for x in range(16):
                if nxt.cells[y][x] != CellState.CAR:
                    self.assertEqual(nxt.velocities[y][x], ZERO)

if __name__ == '__main__':
    unittest.main()
