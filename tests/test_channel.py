"""Tests for the obstacle channel driver and tracer conservation.

Velocity is derived from a streamfunction held at zero around the obstacle,
so it is discretely non-divergent and vanishes on every face touching the
solid. With fluxes through such faces zeroed, the fluid volume integral of a
tracer is conserved to round-off and a uniform tracer stays uniform.
"""

import mlflow
import numpy as np
import pandas as pd
import pytest

from oceanfv.advection import FluxForm, HighOrderVectorInvariant, NoAdvection, VectorInvariant
from oceanfv.datastructures import ChannelParameters, GridParameters, Metrics, TimeSeries
from oceanfv.diagnostics import mass_residual, max_divergence, summary_table, tracer_statistics
from oceanfv.errors import ConfigurationError
from oceanfv.grids import ccc, fcc, cfc
from oceanfv.simulation import ObstacleChannel

SMALL_GRID = {"Nx": 32, "Ny": 16, "Lx": 2.0, "Ly": 1.0, "halo": 4}

SCHEMES = [
    VectorInvariant(),
    HighOrderVectorInvariant(order=5, reconstruction="weno"),
    HighOrderVectorInvariant(order=3, reconstruction="upwind", stencil="velocity"),
    FluxForm(reconstruction="centered", order=2),
    FluxForm(reconstruction="upwind", order=3),
    FluxForm(reconstruction="weno", order=5),
]


def make_channel(advection=None, **kwargs):
    options = {"grid": dict(SMALL_GRID), "n_steps": 5, "dt": 2e-3}
    options.update(kwargs)
    return ObstacleChannel(advection=advection, **options)


class TestSetup:
    """Grid, velocity and tracer construction."""

    def test_defaults(self):
        channel = ObstacleChannel()
        assert isinstance(channel.advection, VectorInvariant)
        assert channel.grid.size == (64, 32, 1)
        assert channel.params.grid.topology == ("periodic", "bounded", "flat")

    def test_parameters_from_mapping(self):
        channel = make_channel(obstacle=[0.5, 0.9, 0.3, 0.7], initial_tracer="blob")
        assert channel.params.obstacle == (0.5, 0.9, 0.3, 0.7)
        assert channel.params.grid == GridParameters(**SMALL_GRID)
        assert channel.grid.size == (32, 16, 1)

    def test_parameters_object(self):
        params = ChannelParameters(grid=GridParameters(**SMALL_GRID), n_steps=2)
        channel = ObstacleChannel(params, advection=NoAdvection())
        assert channel.params is params

    def test_obstacle_is_solid(self):
        channel = make_channel()
        solid = channel.grid.inactive_nodes(ccc)[channel.grid.interior_slices(ccc)]
        # 0.8 <= x <= 1.2, 0.4 <= y <= 0.6 on a 1/16 grid
        assert solid.sum() == 6 * 4
        assert channel.grid.inactive(ccc, 16, 8, 0)
        assert not channel.grid.inactive(ccc, 2, 2, 0)

    def test_velocity_is_non_divergent(self):
        channel = make_channel()
        assert max_divergence(channel.grid, channel.velocities) < 1e-13
        assert abs(mass_residual(channel.grid, channel.velocities)) < 1e-14

    def test_velocity_vanishes_next_to_obstacle(self):
        channel = make_channel()
        for component, loc in ((channel.velocities.u, fcc), (channel.velocities.v, cfc)):
            inactive = channel.grid.inactive_nodes(loc)
            assert np.all(component.data[inactive] == 0.0)
            assert np.max(np.abs(component.interior)) > 0.01

    def test_no_flow_through_walls(self):
        channel = make_channel()
        v = channel.velocities.v
        Ny = channel.grid.Ny
        assert np.all(v[np.arange(32), 0, 0] == 0.0)
        assert np.all(v[np.arange(32), Ny, 0] == 0.0)

    def test_halo_too_small(self):
        with pytest.raises(ConfigurationError, match="halo"):
            make_channel(HighOrderVectorInvariant(order=5), grid=dict(SMALL_GRID, halo=2))

    def test_rejects_non_scheme(self):
        with pytest.raises(TypeError):
            make_channel(advection="weno")

    def test_unknown_initial_tracer(self):
        with pytest.raises(ValueError, match="Unknown initial tracer"):
            make_channel(initial_tracer="stripes")


class TestTracerConservation:
    """Forward Euler stepping of a tracer around the obstacle."""

    @pytest.mark.parametrize("scheme", SCHEMES, ids=repr)
    def test_uniform_tracer_stays_uniform(self, scheme):
        channel = make_channel(scheme, initial_tracer="uniform")
        metrics = channel.run()
        assert metrics.tracer_max == pytest.approx(1.0, abs=1e-12)
        assert metrics.tracer_min == pytest.approx(1.0, abs=1e-12)
        assert abs(metrics.tracer_mean_drift) < 1e-13

    @pytest.mark.parametrize("scheme", SCHEMES, ids=repr)
    def test_blob_mean_conserved(self, scheme):
        channel = make_channel(scheme, initial_tracer="blob", n_steps=10)
        initial = tracer_statistics(channel.tracer)
        metrics = channel.run()
        assert abs(metrics.tracer_mean - initial["mean"]) < 1e-12
        assert metrics.tracer_max < initial["max"] + 0.05
        # the tracer actually moved
        assert max(channel.time_series.max_tendency) > 1e-3

    def test_solid_tracer_untouched(self):
        channel = make_channel(FluxForm(reconstruction="weno", order=5), initial_tracer="blob")
        channel.run()
        solid = channel.grid.inactive_nodes(ccc)
        assert np.all(channel.tracer.data[solid] == 0.0)

    def test_no_advection_leaves_tracer(self):
        channel = make_channel(NoAdvection(), initial_tracer="blob")
        before = channel.tracer.interior.copy()
        channel.run()
        assert np.array_equal(channel.tracer.interior, before)
        assert channel.metrics.normalised_energy_production == 0.0

    def test_step_returns_max_tendency(self):
        channel = make_channel(initial_tracer="blob")
        tendency = channel.tracer_tendency()
        assert channel.step() == pytest.approx(np.max(np.abs(tendency.interior)))

    def test_momentum_tendency_is_negative_advection(self):
        channel = make_channel()
        Gu, Gv = channel.momentum_tendencies()
        assert np.all(np.isfinite(Gu.interior)) and np.all(np.isfinite(Gv.interior))
        assert np.max(np.abs(Gu.interior)) > 0


class TestResults:
    """Metrics, time series and MLflow logging."""

    @pytest.fixture
    def finished(self):
        channel = make_channel(initial_tracer="blob", n_steps=4)
        channel.run()
        return channel

    def test_metrics(self, finished):
        m = finished.metrics
        assert m.steps == 4
        assert m.wall_time_seconds > 0
        assert m.max_divergence < 1e-13
        assert np.isfinite(m.normalised_energy_production)

    def test_time_series(self, finished):
        df = finished.time_series.to_dataframe()
        assert isinstance(df, pd.DataFrame)
        assert len(df) == 4
        assert list(df.columns) == ["tracer_max", "tracer_min", "tracer_mean", "max_tendency"]

    def test_time_series_without_tendency(self):
        series = TimeSeries()
        series.append({"max": 1.0, "min": 0.0, "mean": 0.5})
        assert "max_tendency" not in series.to_dataframe().columns
        assert len(series.to_mlflow_batch()) == 3

    def test_dataframes(self, finished):
        assert finished.metrics.to_dataframe().shape == (1, len(Metrics().to_mlflow()))
        params = finished.params.to_dataframe()
        assert params.loc[0, "Nx"] == 32
        assert params.loc[0, "obstacle_x0"] == pytest.approx(0.8)
        assert params.loc[0, "topology"] == "periodic,bounded,flat"

    def test_summary_table(self, finished):
        df = summary_table(tracer_statistics(finished.tracer), label="blob")
        assert list(df.columns) == ["label", "max", "min", "mean"]

    def test_log_to_mlflow(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        mlflow.set_tracking_uri(f"sqlite:///{tmp_path / 'mlflow.db'}")
        mlflow.set_experiment("channel-test")
        channel = make_channel(HighOrderVectorInvariant(order=5), initial_tracer="blob", n_steps=3)
        with mlflow.start_run() as run:
            channel.run()

        data = mlflow.tracking.MlflowClient().get_run(run.info.run_id).data
        assert data.params["advection"] == "high_order_vector_invariant"
        assert data.params["Nx"] == "32"
        assert data.metrics["steps"] == 3
        assert data.metrics["tracer_mean"] == pytest.approx(channel.metrics.tracer_mean)
        assert "normalised_energy_production" in data.metrics
        assert "kinetic_energy_production" not in data.metrics
        history = mlflow.tracking.MlflowClient().get_metric_history(run.info.run_id, "tracer_max")
        assert len(history) >= 3
