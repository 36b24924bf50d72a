import argparse
import time
from typing import Optional, Tuple

from cellflow.domain import config
from cellflow.domain.errors import InvalidConfiguration
from cellflow.domain.models import ControllerMode
from cellflow.experiments.results_writer import ResultsWriter
from cellflow.kernel.simulation_kernel import Simulation

def mutate_parameters(power: float, threshold: float) -> Tuple[float, float]:
    if power < config.POWER_LIMIT:
        return power + config.POWER_STEP, threshold
    return config.POWER_RESET, threshold + config.THRESHOLD_STEP


class ExperimentDriver:
    """Sweeps the vehicle count for successive (power, threshold) pairs.

    For every count the driver averages NUM_EXP runs. When the count no
    longer fits on the road, the sweep for the current pair is closed,
    the pair is mutated and the sweep restarts from zero vehicles.
    """

    def __init__(
        self,
        power: float = config.DEFAULT_POWER,
        threshold: float = config.DEFAULT_THRESHOLD,
        rows: int = config.VIEWPORT_HEIGHT // config.SCALE,
        cols: int = config.VIEWPORT_WIDTH // config.SCALE,
        mode: ControllerMode = ControllerMode.ADAPTIVE,
        num_exp: int = config.NUM_EXP,
        max_steps: int = config.MAX_STEPS_PER_RUN,
        seed: int = 42,
        overall_writer: Optional[ResultsWriter] = None,
        delay_writer: Optional[ResultsWriter] = None,
    ):
        self.power = power
        self.threshold = threshold
        self.rows = rows
        self.cols = cols
        self.mode = mode
        self.num_exp = num_exp
        self.max_steps = max_steps
        self.seed = seed
        self.overall_writer = overall_writer
        self.delay_writer = delay_writer
        self.total_cars = 0
        self.results = []
        self._runs = 0

    def run_once(self, total_cars: int) -> Tuple[int, int]:
        sim = Simulation(total_cars, self.power, self.threshold, self.rows, self.cols,
                         seed=self.seed + self._runs, mode=self.mode)
        self._runs += 1
        while not sim.stopped and sim.state.overall_time < self.max_steps:
            sim.step()
        if not sim.stopped:
            print(f"Run with {total_cars} cars did not empty within {self.max_steps} steps")
        metrics = sim.metrics()
        return metrics.overallTime, metrics.timeDelay

    def measure(self, total_cars: int) -> Tuple[float, float]:
        overall_time = 0.0
        time_delay = 0.0
        for _ in range(self.num_exp):
            ot, td = self.run_once(total_cars)
            overall_time += ot
            time_delay += td
        return overall_time / self.num_exp, time_delay / self.num_exp

    def _start_rows(self):
        for writer in (self.overall_writer, self.delay_writer):
            if writer:
                writer.start_row(self.power, self.threshold)

    def _end_rows(self):
        for writer in (self.overall_writer, self.delay_writer):
            if writer:
                writer.end_row()

    def sweep(self):
        """Run one sweep for the current parameters until the road overflows."""
        self.total_cars = 0
        self._start_rows()
        while True:
            try:
                mean_time, mean_delay = self.measure(self.total_cars)
            except InvalidConfiguration as e:
                print(f"Sweep p={self.power}, k={self.threshold} ended: {e}")
                self._end_rows()
                return

            print(f"TOTAL CARS = {self.total_cars}: mean={mean_time}, timeDelay={mean_delay}")
            self.results.append({
                "power": self.power,
                "threshold": self.threshold,
                "totalCars": self.total_cars,
                "overallTime": mean_time,
                "timeDelay": mean_delay,
            })
            if self.overall_writer:
                self.overall_writer.append_value(mean_time)
            if self.delay_writer:
                self.delay_writer.append_value(mean_delay)
            self.total_cars += 1

    def run(self, generations: int):
        for _ in range(generations):
            self.sweep()
            self.power, self.threshold = mutate_parameters(self.power, self.threshold)
            print(f"NEW GENERATION: t={self.threshold}, p={self.power}")
        return self.results


def run_headless_experiment(args: argparse.Namespace):
    driver = ExperimentDriver(
        power=args.power,
        threshold=args.threshold,
        rows=args.rows,
        cols=args.cols,
        mode=ControllerMode(args.mode),
        num_exp=args.num_exp,
        max_steps=args.max_steps,
        seed=args.seed,
        overall_writer=ResultsWriter(args.overall_out),
        delay_writer=ResultsWriter(args.delay_out),
    )

    start_time = time.time()
    driver.run(args.generations)
    end_time = time.time()
    print(f"Experiment finished in {end_time - start_time:.4f}s")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Sweep vehicle load over the crossroad automaton.")
    parser.add_argument("--power", type=float, default=config.DEFAULT_POWER)
    parser.add_argument("--threshold", type=float, default=config.DEFAULT_THRESHOLD)
    parser.add_argument("--rows", type=int, default=config.VIEWPORT_HEIGHT // config.SCALE)
    parser.add_argument("--cols", type=int, default=config.VIEWPORT_WIDTH // config.SCALE)
    parser.add_argument("--mode", choices=[m.value for m in ControllerMode], default=ControllerMode.ADAPTIVE.value)
    parser.add_argument("--num-exp", type=int, default=config.NUM_EXP)
    parser.add_argument("--max-steps", type=int, default=config.MAX_STEPS_PER_RUN)
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--generations", type=int, default=1)
    parser.add_argument("--overall-out", default="results/overall_time.csv")
    parser.add_argument("--delay-out", default="results/time_delay.csv")
    return parser.parse_args(argv)


if __name__ == "__main__":
    run_headless_experiment(parse_args())
