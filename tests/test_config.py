import pytest

from peso_tracker.config import DEFAULT_CONFIG, load_config


def test_load_config_defaults_without_file():
    config = load_config()
    assert config == DEFAULT_CONFIG
    config["output_modules"]["csv"] = "changed"
    assert DEFAULT_CONFIG["output_modules"]["csv"] != "changed"


def test_load_config_merges_missing_keys(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "output_dir: out\nperiod_policy: fortnight\noutput_modules:\n  csv: my.Output\n",
        encoding="utf-8",
    )
    config = load_config(path)
    assert config["output_dir"] == "out"
    assert config["period_policy"] == "fortnight"
    assert config["output_modules"]["csv"] == "my.Output"
    assert config["output_modules"]["excel"] == DEFAULT_CONFIG["output_modules"]["excel"]
    assert config["currency_symbol"] == "$"


def test_load_config_rejects_non_mapping(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(path)
