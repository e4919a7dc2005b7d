import json
from pathlib import Path

import pytest

import config
from config import AppConfig, load_config, to_json


def test_defaults_without_a_config_file() -> None:
    loaded, resolved_path = load_config()
    assert resolved_path is None
    assert loaded == AppConfig()
    assert loaded.conversion.from_style == "itg-singles"
    assert loaded.conversion.to_styles == ["itg-doubles"]
    assert loaded.output.description_prefix == "STEPSHIFT"


def test_file_in_working_directory_is_used(tmp_path: Path) -> None:
    config_path = tmp_path / "stepshift_config.json"
    config_path.write_text(
        json.dumps({"conversion": {"to_styles": ["pump_doubles", "ITG-triples"], "crossovers": 2}}),
        encoding="utf-8",
    )
    loaded, resolved_path = load_config()
    assert resolved_path == config_path
    assert loaded.conversion.to_styles == ["pump-doubles", "itg-triples"]
    assert loaded.conversion.crossovers == 2


def test_explicit_path_and_environment_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "elsewhere.json"
    config_path.write_text(json.dumps({"output": {"edits": False}}), encoding="utf-8")
    monkeypatch.setenv("STEPSHIFT_CONFIG_PATH", str(config_path))
    monkeypatch.setenv("STEPSHIFT_EDITS", "yes")
    monkeypatch.setenv("STEPSHIFT_TO_STYLES", "pump-singles, horizon-singles")
    monkeypatch.setenv("STEPSHIFT_CROSSOVERS", "not a number")

    loaded, resolved_path = load_config()
    assert resolved_path == config_path
    assert loaded.output.edits is True
    assert loaded.conversion.to_styles == ["pump-singles", "horizon-singles"]
    assert loaded.conversion.crossovers == 0


def test_missing_explicit_path_raises(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STEPSHIFT_CONFIG_PATH", str(tmp_path / "missing.json"))
    with pytest.raises(FileNotFoundError):
        load_config()


@pytest.mark.parametrize(
    "payload",
    [
        "[1, 2]",
        "{not json",
        json.dumps({"conversion": {"from_style": "dance-single"}}),
        json.dumps({"conversion": {"to_styles": []}}),
        json.dumps({"output": {"description_prefix": "A:B"}}),
    ],
)
def test_invalid_config_raises_value_error(tmp_path: Path, payload: str) -> None:
    config_path = tmp_path / "bad.json"
    config_path.write_text(payload, encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(config_path)


def test_main_prints_json(capsys: pytest.CaptureFixture) -> None:
    assert config.main() == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["ok"] is True
    assert payload["config_path"] is None
    assert payload["config"] == json.loads(to_json(AppConfig()))
