import logging

import pytest

from kineticrir import LoggingConfig, SimulationConfig, default_config, get_logger, setup_logging


def test_default_config_values():
    cfg = default_config()
    assert cfg.speed_of_sound == 330.0
    assert cfg.precision == 1e-6
    assert cfg.num_workers == 1
    assert cfg.sampler == "marsaglia"
    assert cfg.max_descent_iterations == 10_000
    assert cfg.reflection_decay == 0.97


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({"num_rays": 0}, "num_rays"),
        ({"speed_of_sound": -1.0}, "speed_of_sound"),
        ({"precision": 1.5}, "precision"),
        ({"num_workers": 0}, "num_workers"),
        ({"sampler": "halton"}, "sampler"),
        ({"reflection_decay": 1.0}, "reflection_decay"),
        ({"max_descent_iterations": 0}, "max_descent_iterations"),
        ({"seed": -3}, "seed"),
        ({"deadline": 0.0}, "deadline"),
    ],
)
def test_config_validation(kwargs, message):
    with pytest.raises(ValueError, match=message):
        SimulationConfig(**kwargs).validate()


def test_config_replace_validates():
    cfg = default_config().replace(num_rays=10, seed=4)
    assert cfg.num_rays == 10
    assert cfg.seed == 4
    with pytest.raises(ValueError):
        cfg.replace(ray_batch_size=0)


def test_logging_level_resolution():
    assert LoggingConfig(level="debug").resolve_level() == logging.DEBUG
    assert LoggingConfig(level=logging.WARNING).resolve_level() == logging.WARNING
    with pytest.raises(ValueError, match="unknown log level"):
        LoggingConfig(level="chatty").resolve_level()
    with pytest.raises(TypeError):
        LoggingConfig(level=1.5).resolve_level()  # type: ignore[arg-type]


def test_setup_logging_keeps_one_handler():
    name = "kineticrir_setup_check"
    logger = setup_logging(LoggingConfig(level="INFO"), name=name)
    again = setup_logging(LoggingConfig(level="DEBUG"), name=name)
    assert logger is again
    assert len(again.handlers) == 1
    assert again.level == logging.DEBUG
    assert again.propagate is False


def test_get_logger_namespacing():
    assert get_logger().name == "kineticrir"
    assert get_logger("sim.raytrace").name == "kineticrir.sim.raytrace"
    assert get_logger("kineticrir.util.buffer").name == "kineticrir.util.buffer"
