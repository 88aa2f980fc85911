import random

import pytest

from slime_trails.agent import ReflectionMode
from slime_trails.app import (
    build_parser,
    config_from_args,
    main,
    parse_window,
    resize_to_window,
)
from slime_trails.config import ConfigurationError, SimulationConfig
from slime_trails.field import SteeringChannel
from slime_trails.simulation import Simulation


def test_parse_window():
    assert parse_window("800x600") == (800, 600)


def test_bad_window_size_is_a_usage_error():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--window", "big"])


def test_config_from_query_argument():
    args = build_parser().parse_args(
        ["--query", "cells=250&res=win", "--window", "1000x500", "--decay", "0.1"]
    )
    config = config_from_args(args)
    assert config.agent_count == 250
    assert (config.width, config.height) == (1000, 500)
    assert config.decay_rate == 0.1


def test_config_from_individual_arguments():
    args = build_parser().parse_args(
        [
            "--agents",
            "40",
            "--resolution",
            "640",
            "--window",
            "1280x720",
            "--steering",
            "color",
            "--reflection",
            "axis",
        ]
    )
    config = config_from_args(args)
    assert config.agent_count == 40
    assert (config.width, config.height) == (640, 360)
    assert config.steering_channel is SteeringChannel.COLOR
    assert config.reflection is ReflectionMode.AXIS


def test_invalid_configuration_exits_with_error(capsys):
    assert main(["--headless", "--agents", "0"]) == 1
    assert "Invalid configuration" in capsys.readouterr().out


def test_headless_run_writes_image(tmp_path):
    output = tmp_path / "trails.png"
    status = main(
        [
            "--headless",
            "--agents",
            "20",
            "--resolution",
            "400",
            "--window",
            "800x600",
            "--steps",
            "3",
            "--seed",
            "1",
            "--output",
            str(output),
        ]
    )
    assert status == 0
    assert output.exists()


def test_minimised_window_does_not_resize():
    sim = Simulation(SimulationConfig(400, 300, agent_count=5), rng=random.Random(2))
    assert resize_to_window(sim, 0, 0) is False
    assert resize_to_window(sim, 800, 0) is False
    assert (sim.field.width, sim.field.height) == (400, 300)


def test_window_resize_keeps_width_and_follows_aspect():
    sim = Simulation(SimulationConfig(400, 300, agent_count=5), rng=random.Random(2))
    assert resize_to_window(sim, 1000, 500) is True
    assert (sim.field.width, sim.field.height) == (400, 200)


def test_scale_option():
    assert build_parser().parse_args([]).scale == 2
    assert build_parser().parse_args(["--scale", "3"]).scale == 3
    with pytest.raises(ConfigurationError):
        config_from_args(build_parser().parse_args(["--scale", "0"]))
