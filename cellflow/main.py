import threading
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from cellflow.domain.errors import InvalidConfiguration
from cellflow.domain.models import (
    FrameResponse, GridSnapshot, Metrics, SimulationConfig, StepResult
)
from cellflow.kernel.simulation_kernel import Simulation
from cellflow.kernel.snapshot_builder import color_grid

class SimulationService:
    """Holds the one live run and serializes access to it."""

    def __init__(self):
        self.lock = threading.Lock()
        self.config: Optional[SimulationConfig] = None
        self.simulation: Optional[Simulation] = None

    def create(self, cfg: SimulationConfig) -> Simulation:
        sim = Simulation(cfg.totalCars, cfg.power, cfg.threshold, cfg.rows, cfg.cols, cfg.seed, cfg.mode)
        with self.lock:
            self.config = cfg
            self.simulation = sim
        return sim

    def current(self) -> Simulation:
        if self.simulation is None:
            raise HTTPException(status_code=404, detail="No simulation created")
        return self.simulation

service = SimulationService()

@asynccontextmanager
async def lifespan(app: FastAPI):
    cfg = SimulationConfig()
    service.create(cfg)
    print(f"Simulation created ({cfg.rows}x{cfg.cols}, Seed: {cfg.seed})")
    yield

app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.post("/api/simulation", response_model=Metrics)
def create_simulation(cfg: SimulationConfig):
    """Replaces the live run with a new one built from the given parameters"""
    try:
        sim = service.create(cfg)
    except InvalidConfiguration as e:
        raise HTTPException(status_code=400, detail=str(e))
    return sim.metrics()

@app.post("/api/simulation/step", response_model=StepResult)
def step_simulation(count: int = Query(default=1, ge=1, le=10000)):
    """Advances the live run by up to `count` iterations"""
    with service.lock:
        sim = service.current()
        if sim.stopped:
            raise HTTPException(status_code=409, detail="Simulation stopped; create a new one")
        steps = 0
        while steps < count and not sim.stopped:
            sim.step()
            steps += 1
        return StepResult(steps=steps, signal=sim.signal, metrics=sim.metrics())

@app.get("/api/simulation/snapshot", response_model=GridSnapshot)
def get_snapshot():
    """Returns the cell grid and the signal state for rendering"""
    with service.lock:
        return service.current().snapshot()

@app.get("/api/simulation/frame", response_model=FrameResponse)
def get_frame():
    """Returns the grid as RGB colours"""
    with service.lock:
        snapshot = service.current().snapshot()
    return FrameResponse(signal=snapshot.signal, colors=color_grid(snapshot))

@app.get("/api/simulation/metrics", response_model=Metrics)
def get_metrics():
    with service.lock:
        return service.current().metrics()

@app.get("/")
def read_root():
    return {"status": "cellflow crossroad automaton running"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=8001)
