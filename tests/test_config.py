import pytest

from diffdeck.runtime.config import EngineConfig, load_config


def test_load_config_defaults_without_environment() -> None:
    assert load_config({}) == EngineConfig()


def test_load_config_reads_prefixed_values() -> None:
    config = load_config(
        {
            "DIFFDECK_SYNC_INDICATOR_MS": "250",
            "DIFFDECK_MAX_DOCUMENTS": "3",
            "DIFFDECK_DEFAULT_LANGUAGE": "typescript",
            "SYNC_INDICATOR_MS": "9999",
        }
    )

    assert config.sync_indicator_ms == 250
    assert config.max_documents == 3
    assert config.default_language == "typescript"


def test_malformed_integers_fall_back() -> None:
    config = load_config({"DIFFDECK_LINE_HEIGHT": "tall"})

    assert config.line_height == EngineConfig().line_height


@pytest.mark.parametrize(
    "env",
    [
        {"DIFFDECK_LINE_HEIGHT": "0"},
        {"DIFFDECK_MIN_DOCUMENTS": "1"},
        {"DIFFDECK_MAX_DOCUMENTS": "1"},
        {"DIFFDECK_SYNC_INDICATOR_MS": "-5"},
        {"DIFFDECK_MIN_DOCUMENTS": "4", "DIFFDECK_MAX_DOCUMENTS": "3"},
    ],
)
def test_out_of_range_values_fall_back(env: dict) -> None:
    assert load_config(env) == EngineConfig()


def test_valid_values_survive_a_bad_neighbour() -> None:
    config = load_config({"DIFFDECK_LINE_HEIGHT": "0", "DIFFDECK_MAX_DOCUMENTS": "3"})

    assert config.line_height == 24
    assert config.max_documents == 3


def test_engine_config_rejects_direct_bad_values() -> None:
    with pytest.raises(ValueError):
        EngineConfig(line_height=0)
    with pytest.raises(ValueError):
        EngineConfig(min_documents=3, max_documents=2)
