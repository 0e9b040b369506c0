import pytest

from portsweep.config import (
    DEFAULT_CONCURRENCY,
    DEFAULT_END_PORT,
    DEFAULT_START_PORT,
    ConfigError,
    ScanConfig,
)


def test_defaults():
    cfg = ScanConfig(address="127.0.0.1")
    assert (cfg.start_port, cfg.end_port) == (DEFAULT_START_PORT, DEFAULT_END_PORT)
    assert (cfg.start_port, cfg.end_port) == (1, 65535)
    assert cfg.concurrency == DEFAULT_CONCURRENCY == 200
    assert cfg.timeout == pytest.approx(1.0)
    assert cfg.grab_banner is True
    assert cfg.port_count == 65535


def test_ports_range_is_inclusive():
    cfg = ScanConfig(address="127.0.0.1", start_port=20, end_port=25)
    assert list(cfg.ports()) == [20, 21, 22, 23, 24, 25]
    assert cfg.port_count == 6


def test_single_port_range():
    cfg = ScanConfig(address="127.0.0.1", start_port=443, end_port=443)
    assert list(cfg.ports()) == [443]


@pytest.mark.parametrize(
    "kwargs",
    [
        {"concurrency": 0},
        {"concurrency": -5},
        {"start_port": 0},
        {"end_port": 65536},
        {"start_port": 100, "end_port": 99},
        {"timeout": 0},
        {"min_latency": -1},
        {"address": ""},
    ],
)
def test_invalid_config_rejected(kwargs):
    params = {"address": "127.0.0.1"}
    params.update(kwargs)
    with pytest.raises(ConfigError):
        ScanConfig(**params)


def test_config_is_immutable():
    cfg = ScanConfig(address="127.0.0.1")
    with pytest.raises(AttributeError):
        cfg.concurrency = 10


def test_config_error_is_value_error():
    assert issubclass(ConfigError, ValueError)
