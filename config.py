"""
config.py

Typed configuration loading and validation for stepshift.

Design goals
- Load at most one UTF-8 JSON config file
- Validate with pydantic (defaults included)
- Support environment variable overrides
- No other I/O beyond reading the config file (no directory creation)

Config file location
- If STEPSHIFT_CONFIG_PATH is set, that file is used.
- Otherwise stepshift searches these paths in order and uses the first one that exists:
  1) ./stepshift_config.json (current working directory)
  2) <user config dir>/stepshift/stepshift/stepshift_config.json
  3) <user config dir>/stepshift/stepshift/config.json
- If none exists, the built-in defaults are used. Command line options always win.

Example config file (stepshift_config.json)
{
  "conversion": {
    "from_style": "itg-singles",
    "to_styles": ["itg-doubles", "pump-doubles"],
    "crossovers": 0,
    "more_easy_crossovers": false,
    "vroom": false,
    "preserve_input_repetitions": false,
    "allow_footswitch": false
  },
  "output": {
    "description_prefix": "STEPSHIFT",
    "edits": false,
    "remove_existing_autogen": false
  }
}
"""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from platformdirs import user_config_dir
from pydantic import BaseModel, Field, ValidationError, field_validator

from sm_convert import DEFAULT_DESCRIPTION_PREFIX
from style import Style


class ConversionConfig(BaseModel):
    from_style: str = Field(default=Style.ITG_SINGLES.value, description="Style of the charts to read.")
    to_styles: List[str] = Field(
        default_factory=lambda: [Style.ITG_DOUBLES.value],
        description="Styles to generate charts for.",
    )
    crossovers: int = Field(default=0, ge=0, description="Crossover level. 0 disables crossovers.")
    more_easy_crossovers: bool = Field(default=False, description="Favor easy (short) crossovers.")
    vroom: bool = Field(default=False, description="Travel further across wide pads.")
    preserve_input_repetitions: bool = Field(default=False, description="Repeat output where the input repeats.")
    allow_footswitch: bool = Field(default=False, description="Allow a foot to step where the other foot is.")

    @field_validator("from_style")
    @classmethod
    def validate_from_style(cls, value: str) -> str:
        return Style.from_name(value).value

    @field_validator("to_styles")
    @classmethod
    def validate_to_styles(cls, value: List[str]) -> List[str]:
        normalized = [Style.from_name(name).value for name in value]
        if not normalized:
            raise ValueError("to_styles must name at least one style")
        return normalized


class OutputConfig(BaseModel):
    description_prefix: str = Field(
        default=DEFAULT_DESCRIPTION_PREFIX,
        description="Marker put at the start of generated chart descriptions.",
    )
    edits: bool = Field(default=False, description="Write generated charts with difficulty Edit.")
    remove_existing_autogen: bool = Field(default=False, description="Strip earlier generated charts first.")

    @field_validator("description_prefix")
    @classmethod
    def validate_description_prefix(cls, value: str) -> str:
        trimmed = (value or "").strip()
        if not trimmed:
            raise ValueError("description_prefix must not be empty")
        if any(symbol in trimmed for symbol in ":;#"):
            raise ValueError("description_prefix must not contain ':', ';' or '#'")
        return trimmed


class AppConfig(BaseModel):
    conversion: ConversionConfig = Field(default_factory=ConversionConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


def _default_config_candidates() -> List[Path]:
    config_directory = Path(user_config_dir("stepshift", "stepshift"))
    return [
        Path.cwd() / "stepshift_config.json",
        config_directory / "stepshift_config.json",
        config_directory / "config.json",
    ]


def _resolve_config_path() -> Optional[Path]:
    explicit_path_text = os.environ.get("STEPSHIFT_CONFIG_PATH", "").strip()
    if explicit_path_text:
        return Path(explicit_path_text)

    for candidate_path in _default_config_candidates():
        if candidate_path.exists():
            return candidate_path

    return None


def _read_json_file_utf8(config_path: Path) -> Dict[str, Any]:
    try:
        raw_text = config_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise
    except OSError as exception:
        raise OSError(f"Failed to read config file: {config_path}. Error: {exception}") from exception

    try:
        parsed = json.loads(raw_text)
    except json.JSONDecodeError as exception:
        raise ValueError(f"Config file is not valid JSON: {config_path}. Error: {exception}") from exception

    if not isinstance(parsed, dict):
        raise ValueError(f"Config file root must be a JSON object: {config_path}")

    return parsed


def _apply_environment_overrides(config_dict: Dict[str, Any]) -> Dict[str, Any]:
    """
    Environment overrides are optional. The config file is the primary source of truth.

    Override variables:
    - STEPSHIFT_FROM_STYLE
    - STEPSHIFT_TO_STYLES (comma separated)
    - STEPSHIFT_CROSSOVERS
    - STEPSHIFT_MORE_EASY_CROSSOVERS
    - STEPSHIFT_VROOM
    - STEPSHIFT_PRESERVE_INPUT_REPETITIONS
    - STEPSHIFT_ALLOW_FOOTSWITCH
    - STEPSHIFT_DESCRIPTION_PREFIX
    - STEPSHIFT_EDITS
    - STEPSHIFT_REMOVE_EXISTING_AUTOGEN
    """
    def ensure_nested(config_root: Dict[str, Any], section_name: str) -> Dict[str, Any]:
        section = config_root.get(section_name)
        if isinstance(section, dict):
            section = dict(section)
        else:
            section = {}
        config_root[section_name] = section
        return section

    updated_config = dict(config_dict)

    conversion_section = ensure_nested(updated_config, "conversion")
    output_section = ensure_nested(updated_config, "output")

    def override_string(env_name: str, target_dict: Dict[str, Any], key_name: str) -> None:
        value_text = os.environ.get(env_name, "")
        if value_text.strip():
            target_dict[key_name] = value_text.strip()

    def override_list(env_name: str, target_dict: Dict[str, Any], key_name: str) -> None:
        value_text = os.environ.get(env_name, "")
        items = [item.strip() for item in value_text.split(",") if item.strip()]
        if items:
            target_dict[key_name] = items

    def override_int(env_name: str, target_dict: Dict[str, Any], key_name: str) -> None:
        value_text = os.environ.get(env_name, "").strip()
        if not value_text:
            return
        try:
            target_dict[key_name] = int(value_text)
        except ValueError:
            return

    def override_bool(env_name: str, target_dict: Dict[str, Any], key_name: str) -> None:
        value_text = os.environ.get(env_name, "").strip().lower()
        if not value_text:
            return
        truthy = {"1", "true", "yes", "on"}
        falsy = {"0", "false", "no", "off"}
        if value_text in truthy:
            target_dict[key_name] = True
        elif value_text in falsy:
            target_dict[key_name] = False

    override_string("STEPSHIFT_FROM_STYLE", conversion_section, "from_style")
    override_list("STEPSHIFT_TO_STYLES", conversion_section, "to_styles")
    override_int("STEPSHIFT_CROSSOVERS", conversion_section, "crossovers")
    override_bool("STEPSHIFT_MORE_EASY_CROSSOVERS", conversion_section, "more_easy_crossovers")
    override_bool("STEPSHIFT_VROOM", conversion_section, "vroom")
    override_bool("STEPSHIFT_PRESERVE_INPUT_REPETITIONS", conversion_section, "preserve_input_repetitions")
    override_bool("STEPSHIFT_ALLOW_FOOTSWITCH", conversion_section, "allow_footswitch")

    override_string("STEPSHIFT_DESCRIPTION_PREFIX", output_section, "description_prefix")
    override_bool("STEPSHIFT_EDITS", output_section, "edits")
    override_bool("STEPSHIFT_REMOVE_EXISTING_AUTOGEN", output_section, "remove_existing_autogen")

    return updated_config


def load_config(config_path: Optional[Path] = None) -> Tuple[AppConfig, Optional[Path]]:
    """Return the validated config and the file it came from (None for defaults)."""
    resolved_path = config_path if config_path is not None else _resolve_config_path()
    json_dict = _read_json_file_utf8(resolved_path) if resolved_path is not None else {}
    json_dict = _apply_environment_overrides(json_dict)

    try:
        config = AppConfig.model_validate(json_dict)
    except ValidationError as exception:
        source_text = str(resolved_path) if resolved_path is not None else "defaults"
        raise ValueError(f"Config validation failed for {source_text}:\n{exception}") from exception

    return config, resolved_path


@lru_cache(maxsize=1)
def get_config() -> Tuple[AppConfig, Optional[Path]]:
    return load_config()


def to_json(config: AppConfig) -> str:
    return json.dumps(config.model_dump(), ensure_ascii=False, indent=2)


def main() -> int:
    try:
        config, resolved_path = load_config()
    except Exception as exception:
        error_payload = {"ok": False, "error": str(exception)}
        print(json.dumps(error_payload, ensure_ascii=False, indent=2))
        return 2

    output_payload = {
        "ok": True,
        "config_path": str(resolved_path) if resolved_path is not None else None,
        "config": json.loads(to_json(config)),
    }
    print(json.dumps(output_payload, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
