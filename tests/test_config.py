"""Tests for scheme configuration, Hydra config groups and the entry point."""

import importlib.util

import mlflow
import pytest
from hydra import compose, initialize_config_dir
from hydra.utils import instantiate
from omegaconf import OmegaConf

from oceanfv.advection import (
    WENO,
    Centered,
    FluxForm,
    HighOrderVectorInvariant,
    NoAdvection,
    StencilKind,
    UpwindBiased,
    VectorInvariant,
    create_advection_scheme,
)
from oceanfv.errors import ConfigurationError
from oceanfv.grids import RectilinearGrid

from conftest import CONF_DIR

ROOT = CONF_DIR.parent


def compose_config(*overrides):
    with initialize_config_dir(config_dir=str(CONF_DIR), version_base=None):
        return compose(config_name="config", overrides=list(overrides))


class TestCreateAdvectionScheme:
    """Factory and constructor validation."""

    @pytest.mark.parametrize(
        "method,kwargs,cls",
        [
            ("none", {}, NoAdvection),
            ("No_Advection", {}, NoAdvection),
            ("vector_invariant", {}, VectorInvariant),
            ("vector_invariant", {"vorticity_scheme": "Energy"}, VectorInvariant),
            ("weno", {"order": 3}, HighOrderVectorInvariant),
            ("high_order_vector_invariant", {"reconstruction": "upwind", "order": 5}, HighOrderVectorInvariant),
            ("flux_form", {"reconstruction": "centered", "order": 4}, FluxForm),
        ],
    )
    def test_known_methods(self, method, kwargs, cls):
        assert isinstance(create_advection_scheme(method, **kwargs), cls)

    def test_unknown_method(self):
        with pytest.raises(ConfigurationError, match="Unknown advection scheme"):
            create_advection_scheme("semi_lagrangian")

    def test_unknown_vorticity_scheme(self):
        with pytest.raises(ConfigurationError, match="Unknown vorticity scheme"):
            VectorInvariant(vorticity_scheme="helicity")

    def test_high_order_needs_biased_reconstruction(self):
        with pytest.raises(ConfigurationError, match="biased"):
            HighOrderVectorInvariant(order=4, reconstruction="centered")

    def test_unknown_stencil(self):
        with pytest.raises(ConfigurationError, match="Unknown stencil"):
            HighOrderVectorInvariant(stencil="pressure")
        assert StencilKind.parse("Velocity") is StencilKind.VELOCITY

    @pytest.mark.parametrize("width", [0.0, -1.0, float("inf")])
    def test_blend_width_must_be_positive_and_finite(self, width):
        with pytest.raises(ConfigurationError, match="Blend width"):
            HighOrderVectorInvariant(blend_width=width)
        with pytest.raises(ConfigurationError, match="Blend width"):
            FluxForm(blend_width=width)

    def test_reconstruction_instance_accepted(self):
        scheme = FluxForm(reconstruction=WENO(5, epsilon=1e-6))
        assert scheme.reconstruction == WENO(5, epsilon=1e-6)
        assert scheme.order == 5

    @pytest.mark.parametrize(
        "scheme,halo",
        [
            (NoAdvection(), 1),
            (VectorInvariant(), 2),
            (HighOrderVectorInvariant(order=3, reconstruction="upwind"), 3),
            (HighOrderVectorInvariant(order=5), 4),
            (FluxForm(reconstruction="centered", order=2), 2),
            (FluxForm(reconstruction="weno", order=5), 4),
        ],
    )
    def test_required_halo(self, scheme, halo):
        assert scheme.required_halo == halo

    def test_validate_checks_non_flat_axes(self):
        grid = RectilinearGrid(size=(8, 8, 1), extent=(1, 1, 1), halo=(3, 3, 3),
                               topology=("periodic", "bounded", "flat"))
        assert FluxForm(reconstruction="upwind", order=3).validate(grid) is not None
        with pytest.raises(ConfigurationError, match="needs a halo of 4 along X"):
            HighOrderVectorInvariant(order=5).validate(grid)

    def test_to_dict_and_repr(self):
        scheme = HighOrderVectorInvariant(order=5, stencil="velocity")
        options = scheme.to_dict()
        assert options == {
            "advection": "high_order_vector_invariant",
            "reconstruction": "WENO",
            "order": 5,
            "stencil": "velocity",
            "blend_width": 1e-6,
        }
        assert repr(scheme).startswith("HighOrderVectorInvariant(reconstruction=WENO, order=5")
        assert VectorInvariant().tracer_reconstruction == Centered(2)
        assert FluxForm().tracer_reconstruction == UpwindBiased(3)


class TestConfigGroups:
    """Every advection config instantiates the scheme it names."""

    @pytest.mark.parametrize(
        "name,cls",
        [
            ("none", NoAdvection),
            ("vector_invariant", VectorInvariant),
            ("energy", VectorInvariant),
            ("weno", HighOrderVectorInvariant),
            ("weno_velocity", HighOrderVectorInvariant),
            ("upwind", HighOrderVectorInvariant),
            ("flux_form", FluxForm),
        ],
    )
    def test_advection_group(self, name, cls):
        cfg = OmegaConf.load(CONF_DIR / "advection" / f"{name}.yaml")
        assert isinstance(instantiate(cfg), cls)

    def test_compose_defaults(self):
        cfg = compose_config()
        assert cfg.grid.Nx == 64
        assert cfg.channel.initial_tracer == "uniform"
        scheme = instantiate(cfg.advection)
        assert isinstance(scheme, VectorInvariant)
        assert scheme.vorticity_scheme == "enstrophy"

    def test_compose_overrides(self):
        cfg = compose_config("advection=weno_velocity", "grid.Nx=32", "channel.n_steps=3")
        scheme = instantiate(cfg.advection)
        assert scheme.stencil is StencilKind.VELOCITY
        assert cfg.grid.Nx == 32
        assert cfg.channel.n_steps == 3


@pytest.fixture
def entry_point():
    """The root ``main.py`` loaded as a module."""
    spec = importlib.util.spec_from_file_location("channel_main", ROOT / "main.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestEntryPoint:
    def test_experiment_name(self, entry_point):
        cfg = OmegaConf.create({"experiment_name": "channel", "mlflow": {"project_prefix": "/Shared/ocean"}})
        assert entry_point.get_experiment_name(cfg) == "/Shared/ocean/channel"
        cfg = OmegaConf.create({"experiment_name": "channel", "mlflow": {}})
        assert entry_point.get_experiment_name(cfg) == "channel"

    def test_run_channel(self, entry_point, tmp_path, monkeypatch):
        uri = f"sqlite:///{tmp_path / 'mlflow.db'}"
        monkeypatch.setenv("MLFLOW_TRACKING_URI", uri)
        monkeypatch.delenv("MLFLOW_PARENT_RUN_ID", raising=False)
        monkeypatch.chdir(tmp_path)
        cfg = compose_config(
            "advection=flux_form",
            "grid.Nx=32",
            "grid.Ny=16",
            "channel.n_steps=2",
            f"mlflow.tracking_uri='{uri}'",
            "experiment_name=entry-point-test",
        )

        assert entry_point.setup_mlflow(cfg) == "entry-point-test"
        run_id = entry_point.run_channel(cfg)

        client = mlflow.tracking.MlflowClient()
        run = client.get_run(run_id)
        assert run.info.run_name == "flux_form_N32x16"
        assert run.data.tags["advection"] == "flux_form"
        assert run.data.metrics["steps"] == 2
        artifacts = {a.path for a in client.list_artifacts(run_id)}
        assert {"config.yaml", "time_series.csv"} <= artifacts
