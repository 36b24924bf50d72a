from enum import Enum
from typing import List, Tuple
from pydantic import BaseModel, ConfigDict, Field

from cellflow.domain import config

class CellState(str, Enum):
    WALL = "WALL"
    ROAD = "ROAD"
    TRAFFIC_LIGHT = "TRAFFIC_LIGHT"
    CAR = "CAR"

class SignalState(str, Enum):
    RED = "RED"
    RED_TO_GREEN = "RED_TO_GREEN"
    GREEN = "GREEN"
    GREEN_TO_RED = "GREEN_TO_RED"

class ControllerMode(str, Enum):
    CLASSIC = "CLASSIC"
    ADAPTIVE = "ADAPTIVE"

class Vector2(BaseModel):
    model_config = ConfigDict(frozen=True)

    row: int = 0
    col: int = 0

ZERO = Vector2()
HORIZONTAL = Vector2(row=0, col=1)
VERTICAL = Vector2(row=1, col=0)

class Metrics(BaseModel):
    overallTime: int
    timeDelay: int
    stopped: bool

class GridSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    cells: Tuple[Tuple[CellState, ...], ...]
    signal: SignalState

# API/Request Models

class SimulationConfig(BaseModel):
    totalCars: int = Field(default=0, ge=0)
    power: float = config.DEFAULT_POWER
    threshold: float = Field(default=config.DEFAULT_THRESHOLD, gt=0)
    rows: int = Field(default=config.VIEWPORT_HEIGHT // config.SCALE, ge=config.MIN_GRID_SIZE)
    cols: int = Field(default=config.VIEWPORT_WIDTH // config.SCALE, ge=config.MIN_GRID_SIZE)
    seed: int = 42
    mode: ControllerMode = ControllerMode.ADAPTIVE

class StepResult(BaseModel):
    steps: int
    signal: SignalState
    metrics: Metrics

class FrameResponse(BaseModel):
    signal: SignalState
    colors: List[List[Tuple[int, int, int]]]
