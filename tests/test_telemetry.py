import pytest

from whitespace_engine.runtime import telemetry


def test_unknown_preset_is_rejected() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(preset="verbose")


def test_config_and_preset_are_exclusive() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(config=object(), preset="development")


def test_span_collects_results_and_reraises() -> None:
    with telemetry.span("test::ok", component="tests", metadata={"rows": 3}) as handle:
        handle.add_metadata("edits", [1, 2])
    assert handle.results == {"edits": "[1, 2]"}

    with pytest.raises(KeyError):
        with telemetry.span("test::boom"):
            raise KeyError("missing")


def test_loggers_are_cached_per_name() -> None:
    assert telemetry.get_logger("tests") is telemetry.get_logger("tests")
