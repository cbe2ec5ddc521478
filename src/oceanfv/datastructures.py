"""Data structures for channel configuration and results.

Structure:
- Parameters: Input configuration (logged to MLflow at start)
- Metrics: Output results (logged to MLflow at end)
- TimeSeries: Per-step diagnostics
"""

from dataclasses import dataclass, asdict, field
from typing import List, Optional, Tuple

import pandas as pd


# ========================================================
# Parameters (Input Configuration)
# ========================================================


@dataclass
class GridParameters:
    """Rectilinear grid configuration (horizontal channel, flat in z)."""

    Nx: int = 64
    Ny: int = 32
    Lx: float = 2.0
    Ly: float = 1.0
    halo: int = 4
    topology: Tuple[str, str, str] = ("periodic", "bounded", "flat")

    def to_dataframe(self):
        return pd.DataFrame([asdict(self)])

    def to_mlflow(self) -> dict:
        params = asdict(self)
        params["topology"] = ",".join(self.topology)
        return params


@dataclass
class ChannelParameters:
    """Obstacle channel configuration."""

    grid: GridParameters = field(default_factory=GridParameters)
    # Obstacle box in domain coordinates (x0, x1, y0, y1)
    obstacle: Tuple[float, float, float, float] = (0.8, 1.2, 0.4, 0.6)
    # Cells around the obstacle where the streamfunction is held at zero
    dilation: int = 3
    amplitude: float = 0.05
    dt: float = 1e-3
    n_steps: int = 10
    initial_tracer: str = "uniform"

    def to_dataframe(self):
        return pd.DataFrame([self.to_mlflow()])

    def to_mlflow(self) -> dict:
        params = {k: v for k, v in asdict(self).items() if k not in ("grid", "obstacle")}
        params.update(self.grid.to_mlflow())
        params.update({f"obstacle_{name}": value for name, value in
                       zip(("x0", "x1", "y0", "y1"), self.obstacle)})
        return params


# ========================================================
# Metrics (Output Results)
# ========================================================


@dataclass
class Metrics:
    """Channel diagnostics computed after stepping."""

    steps: int = 0
    wall_time_seconds: float = 0.0
    max_divergence: float = 0.0
    mass_residual: float = 0.0
    normalised_energy_production: float = 0.0
    tracer_max: float = 0.0
    tracer_min: float = 0.0
    tracer_mean: float = 0.0
    tracer_mean_drift: float = 0.0

    def to_dataframe(self):
        return pd.DataFrame([asdict(self)])

    def to_mlflow(self) -> dict:
        return {k: float(v) for k, v in asdict(self).items()}


# ========================================================
# Time Series (Per-step diagnostics)
# ========================================================


@dataclass
class TimeSeries:
    """Tracer statistics (one value per step)."""

    tracer_max: List[float] = field(default_factory=list)
    tracer_min: List[float] = field(default_factory=list)
    tracer_mean: List[float] = field(default_factory=list)
    max_tendency: Optional[List[float]] = None

    def append(self, statistics: dict):
        self.tracer_max.append(statistics["max"])
        self.tracer_min.append(statistics["min"])
        self.tracer_mean.append(statistics["mean"])

    def to_dataframe(self) -> pd.DataFrame:
        """Convert to DataFrame with one row per step."""
        return pd.DataFrame({k: v for k, v in asdict(self).items() if v is not None})

    def to_mlflow_batch(self) -> list:
        """MLflow ``Metric`` entries, one per value and step."""
        from mlflow.entities import Metric

        timestamp = 0
        batch = []
        for name, values in asdict(self).items():
            if values is None:
                continue
            batch.extend(Metric(name, float(value), timestamp, step) for step, value in enumerate(values))
        return batch
