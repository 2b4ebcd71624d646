"""CLI configuration.

Settings are layered: CLI flags, then ``YGOSEARCH_*`` environment variables,
then the selected profile of the TOML config file, then defaults.

Example config.toml:

    [default]
    cards_path = "~/ygo/cards.json"
    sets_path = "~/ygo/sets.json"
    result_limit = 300

    [profiles.fast]
    timeout_seconds = 2.0
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

from .errors import CLIError

DEFAULT_CARDS_PATH = "cards.json"
DEFAULT_SETS_PATH = "sets.json"
DEFAULT_RESULT_LIMIT = 300

ENV_PREFIX = "YGOSEARCH_"


@dataclass(frozen=True, slots=True)
class ProfileConfig:
    cards_path: str | None = None
    sets_path: str | None = None
    result_limit: int | None = None
    timeout_seconds: float | None = None


@dataclass(frozen=True, slots=True)
class LoadedConfig:
    default: ProfileConfig = field(default_factory=ProfileConfig)
    profiles: dict[str, ProfileConfig] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class SearchConfig:
    """Effective settings for one CLI invocation."""

    cards_path: Path
    sets_path: Path
    result_limit: int
    timeout_seconds: float | None


_PROFILE_KEYS = {f.name for f in fields(ProfileConfig)}


def _profile_from_table(table: Any, *, where: str) -> ProfileConfig:
    if not isinstance(table, dict):
        raise CLIError.config(f"Config section '{where}' must be a table.")
    unknown = sorted(set(table) - _PROFILE_KEYS)
    if unknown:
        raise CLIError.config(f"Unknown key(s) in config section '{where}': {', '.join(unknown)}")
    try:
        profile = ProfileConfig(**table)
        return replace(
            profile,
            result_limit=None if profile.result_limit is None else int(profile.result_limit),
            timeout_seconds=None
            if profile.timeout_seconds is None
            else float(profile.timeout_seconds),
        )
    except (TypeError, ValueError) as e:
        raise CLIError.config(f"Invalid value in config section '{where}': {e}") from None


def load_config(path: Path) -> LoadedConfig:
    """Load the TOML config file. A missing file yields an empty config."""
    if not path.exists():
        return LoadedConfig()
    try:
        with path.open("rb") as f:
            raw = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise CLIError.config(f"Failed to read config {path}: {e}") from None

    default = _profile_from_table(raw.get("default", {}), where="default")
    profiles_raw = raw.get("profiles", {})
    if not isinstance(profiles_raw, dict):
        raise CLIError.config("Config section 'profiles' must be a table.")
    profiles = {
        name: _profile_from_table(table, where=f"profiles.{name}")
        for name, table in profiles_raw.items()
    }
    return LoadedConfig(default=default, profiles=profiles)


def _env(name: str) -> str | None:
    value = os.getenv(ENV_PREFIX + name, "").strip()
    return value or None


def _env_number(name: str, convert: type[int] | type[float]) -> int | float | None:
    raw = _env(name)
    if raw is None:
        return None
    try:
        return convert(raw)
    except ValueError:
        raise CLIError.config(f"{ENV_PREFIX}{name} must be a number, got {raw!r}") from None


def resolve_search_config(
    profile: ProfileConfig,
    *,
    cards_path: str | None = None,
    sets_path: str | None = None,
    result_limit: int | None = None,
    timeout_seconds: float | None = None,
) -> SearchConfig:
    """Merge flag values, environment variables and a profile into settings."""
    cards = cards_path or _env("CARDS") or profile.cards_path or DEFAULT_CARDS_PATH
    sets = sets_path or _env("SETS") or profile.sets_path or DEFAULT_SETS_PATH

    limit = result_limit
    if limit is None:
        limit = _env_number("RESULT_LIMIT", int)  # type: ignore[assignment]
    if limit is None:
        limit = profile.result_limit
    if limit is None:
        limit = DEFAULT_RESULT_LIMIT
    if limit < 0:
        raise CLIError.usage("Result limit must be >= 0.")

    timeout = timeout_seconds
    if timeout is None:
        timeout = _env_number("TIMEOUT", float)
    if timeout is None:
        timeout = profile.timeout_seconds
    if timeout is not None and timeout <= 0:
        raise CLIError.usage("Timeout must be > 0.")

    return SearchConfig(
        cards_path=Path(cards).expanduser(),
        sets_path=Path(sets).expanduser(),
        result_limit=int(limit),
        timeout_seconds=timeout,
    )
