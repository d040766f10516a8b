"""Match configuration and its persistent JSON file.

``MatchConfig`` validates strictly: an invalid value raises ``ConfigError``
at setup time. Reading the config file is forgiving: a missing, unreadable,
or malformed file behaves like an empty one.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Mapping

from platformdirs import user_config_dir

from .matching.block import BLOCK_POLICIES, BLOCK_POLICY_RECTANGLE
from .windows import POLICY_SAME_KIND, UnknownPolicyError, WindowPolicy, normalize_policy

APP_NAME = "visimatch"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH

DEFAULT_CASE_INSENSITIVE_KINDS = frozenset({"markdown", "text", "help"})


class ConfigError(ValueError):
    """A configuration value is invalid."""


def _require_count(name: str, value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise ConfigError(f"{name} must be >= 0, got {value!r}")
    return value


def _require_bool(name: str, value: object) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"{name} must be a boolean, got {value!r}")
    return value


def _coerce_case_insensitive(value: object) -> bool | frozenset[str]:
    if isinstance(value, bool):
        return value
    if isinstance(value, (str, bytes)) or not hasattr(value, "__iter__"):
        raise ConfigError(f"case_insensitive must be a boolean or a collection of kinds, got {value!r}")
    kinds = frozenset(value)  # type: ignore[arg-type]
    if not all(isinstance(kind, str) for kind in kinds):
        raise ConfigError(f"case_insensitive kinds must be strings, got {value!r}")
    return kinds


@dataclass(frozen=True)
class MatchConfig:
    """Thresholds and policies for one highlight session.

    ``case_insensitive`` is either a flag for every buffer or the set of
    document kinds that match case-insensitively.
    """

    min_selected_characters: int = 6
    max_selected_lines: int = 30
    strict_spacing: bool = False
    case_insensitive: bool | frozenset[str] = DEFAULT_CASE_INSENSITIVE_KINDS
    buffers: WindowPolicy = POLICY_SAME_KIND
    max_block_width: int = 50
    block_policy: str = BLOCK_POLICY_RECTANGLE

    def __post_init__(self) -> None:
        _require_count("min_selected_characters", self.min_selected_characters)
        _require_count("max_selected_lines", self.max_selected_lines)
        _require_count("max_block_width", self.max_block_width)
        _require_bool("strict_spacing", self.strict_spacing)
        object.__setattr__(self, "case_insensitive", _coerce_case_insensitive(self.case_insensitive))
        try:
            object.__setattr__(self, "buffers", normalize_policy(self.buffers))
        except UnknownPolicyError as exc:
            raise ConfigError(str(exc)) from exc
        if self.block_policy not in BLOCK_POLICIES:
            raise ConfigError(f"Invalid block policy: {self.block_policy!r}")

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> MatchConfig:
        """Merge ``data`` over the defaults; unknown keys are rejected."""
        known = {field.name for field in fields(cls)}
        unknown = sorted(str(key) for key in data if key not in known)
        if unknown:
            raise ConfigError(f"Unknown config option(s): {', '.join(unknown)}")
        return cls(**data)  # type: ignore[arg-type]

    def to_mapping(self) -> dict[str, object]:
        """Return a JSON-serializable mapping; predicate policies cannot be saved."""
        if callable(self.buffers):
            raise ConfigError("a predicate window policy cannot be serialized")
        data: dict[str, object] = {field.name: getattr(self, field.name) for field in fields(self)}
        if isinstance(self.case_insensitive, frozenset):
            data["case_insensitive"] = sorted(self.case_insensitive)
        return data

    def is_case_insensitive(self, *kinds: str) -> bool:
        """Return whether matching is case-insensitive for any of ``kinds``."""
        if isinstance(self.case_insensitive, bool):
            return self.case_insensitive
        return any(kind in self.case_insensitive for kind in kinds)


def load_config(path: Path | None = None) -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    config_path = path if path is not None else CONFIG_PATH
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object], path: Path | None = None) -> None:
    """Persist config data as pretty-printed JSON.

    Any filesystem/serialization error is ignored to keep callers non-fatal
    when config cannot be written.
    """
    config_path = path if path is not None else CONFIG_PATH
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception:
        pass


def load_match_config(path: Path | None = None) -> MatchConfig:
    """Load and validate the persisted config.

    A list of kinds for ``case_insensitive`` is accepted since JSON has no
    sets. Invalid values raise ``ConfigError``.
    """
    return MatchConfig.from_mapping(load_config(path))
