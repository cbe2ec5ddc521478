"""Obstacle channel - tracer advection around an immersed obstacle.

Usage:
    uv run python main.py
    uv run python main.py advection=weno grid.Nx=128 grid.Ny=64
    uv run python main.py -m advection=vector_invariant,energy,weno,flux_form
"""

import logging
import os
import sys
import tempfile
from pathlib import Path

import hydra
import mlflow
from dotenv import load_dotenv
from hydra.utils import instantiate
from omegaconf import DictConfig, OmegaConf

load_dotenv()
sys.path.insert(0, str(Path(__file__).parent / "src"))

log = logging.getLogger(__name__)


def get_experiment_name(cfg: DictConfig) -> str:
    """Build full experiment name with optional prefix."""
    name = cfg.experiment_name
    prefix = cfg.mlflow.get("project_prefix", "")
    if prefix and not name.startswith("/"):
        return f"{prefix}/{name}"
    return name


def setup_mlflow(cfg: DictConfig) -> str:
    """Setup MLflow tracking and return experiment name."""
    tracking_uri = cfg.mlflow.get("tracking_uri", "./mlruns")
    if str(cfg.mlflow.get("mode", "")).lower() in ("files", "local"):
        os.environ.pop("MLFLOW_TRACKING_URI", None)
    os.environ["MLFLOW_TRACKING_URI"] = str(tracking_uri)
    mlflow.set_tracking_uri(tracking_uri)

    experiment_name = get_experiment_name(cfg)
    mlflow.set_experiment(experiment_name)
    return experiment_name


def run_channel(cfg: DictConfig) -> str:
    """Run the obstacle channel and log to MLflow. Returns run_id."""
    from oceanfv.simulation import ObstacleChannel

    advection = instantiate(cfg.advection)
    channel = ObstacleChannel(
        advection=advection,
        grid=OmegaConf.to_container(cfg.grid),
        **OmegaConf.to_container(cfg.channel),
    )
    run_name = f"{advection.name}_N{channel.params.grid.Nx}x{channel.params.grid.Ny}"

    parent_run_id = os.environ.get("MLFLOW_PARENT_RUN_ID")
    tags = {"advection": advection.name}
    if parent_run_id:
        tags.update({"mlflow.parentRunId": parent_run_id, "parent_run_id": parent_run_id, "sweep": "child"})

    with mlflow.start_run(run_name=run_name, tags=tags, nested=bool(parent_run_id)) as run:
        mlflow.log_dict(OmegaConf.to_container(cfg), "config.yaml")

        log.info(f"Running: {advection!r} for {channel.params.n_steps} steps")
        metrics = channel.run()

        with tempfile.TemporaryDirectory() as tmpdir:
            csv_path = Path(tmpdir) / "time_series.csv"
            channel.time_series.to_dataframe().to_csv(csv_path, index_label="step")
            mlflow.log_artifact(str(csv_path))

        log.info(
            f"Done: tracer max={metrics.tracer_max:.6g}, min={metrics.tracer_min:.6g}, "
            f"mean drift={metrics.tracer_mean_drift:.3e}, mass residual={metrics.mass_residual:.3e}"
        )
        return run.info.run_id


@hydra.main(config_path="conf", config_name="config", version_base=None)
def main(cfg: DictConfig) -> None:
    """Main entry point."""
    log.info(f"Advection: {cfg.advection._target_}, grid={cfg.grid.Nx}x{cfg.grid.Ny}")
    log.info(f"MLflow experiment: {setup_mlflow(cfg)}")
    run_channel(cfg)


if __name__ == "__main__":
    main()
