from __future__ import annotations

import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

from dotenv import load_dotenv

from ygosearch.cards import CardCatalog, load_cards, load_sets
from ygosearch.exceptions import (
    CardDataError,
    QueryParseError,
    SearchTimeoutError,
    YgoSearchError,
)

from .config import (
    LoadedConfig,
    ProfileConfig,
    SearchConfig,
    load_config,
    resolve_search_config,
)
from .errors import CLIError
from .paths import CliPaths, get_paths
from .results import CommandMeta, CommandResult, ErrorInfo

OutputFormat = Literal["table", "json"]


@dataclass
class CLIContext:
    output: OutputFormat
    quiet: bool
    verbosity: int
    profile: str | None
    config_path: Path | None
    dotenv: bool
    env_file: Path
    log_file: Path | None
    enable_log_file: bool

    _paths: CliPaths = field(default_factory=get_paths)
    _loaded_config: LoadedConfig | None = None
    _catalogs: dict[tuple[Path, Path], CardCatalog] = field(default_factory=dict)

    def load_dotenv_if_requested(self) -> None:
        if not self.dotenv:
            return
        if not self.env_file.exists():
            raise CLIError.usage(f"--dotenv was given but {self.env_file} does not exist.")
        load_dotenv(dotenv_path=self.env_file, override=False)

    @property
    def paths(self) -> CliPaths:
        return self._paths

    def _config_path(self) -> Path:
        return self.config_path or self.paths.config_path

    def load_config(self) -> LoadedConfig:
        if self._loaded_config is None:
            self._loaded_config = load_config(self._config_path())
        return self._loaded_config

    def _effective_profile(self) -> str:
        return self.profile or os.getenv("YGOSEARCH_PROFILE") or "default"

    def _profile_config(self) -> ProfileConfig:
        cfg = self.load_config()
        name = self._effective_profile()
        if name == "default":
            return cfg.default
        if name not in cfg.profiles:
            raise CLIError.config(
                f"Unknown profile '{name}'.",
                hint=f"Define [profiles.{name}] in {self._config_path()}",
            )
        return cfg.profiles[name]

    def resolve_search_config(
        self,
        *,
        cards_path: str | None = None,
        sets_path: str | None = None,
        result_limit: int | None = None,
        timeout_seconds: float | None = None,
    ) -> SearchConfig:
        self.load_dotenv_if_requested()
        return resolve_search_config(
            self._profile_config(),
            cards_path=cards_path,
            sets_path=sets_path,
            result_limit=result_limit,
            timeout_seconds=timeout_seconds,
        )

    def get_catalog(self, config: SearchConfig, *, warnings: list[str]) -> CardCatalog:
        key = (config.cards_path, config.sets_path)
        catalog = self._catalogs.get(key)
        if catalog is None:
            cards = load_cards(config.cards_path)
            sets_by_name = None
            if config.sets_path.exists():
                sets_by_name = load_sets(config.sets_path)
            else:
                warnings.append(
                    f"Set list {config.sets_path} not found; year: filters will not match."
                )
            catalog = CardCatalog(cards, sets_by_name)
            self._catalogs[key] = catalog
        return catalog

    def close(self) -> None:
        self._catalogs.clear()


def exit_code_for_exception(exc: Exception) -> int:
    if isinstance(exc, CLIError):
        return exc.exit_code
    if isinstance(exc, QueryParseError):
        return 2
    return 1


def error_info_for_exception(exc: Exception) -> ErrorInfo:
    if isinstance(exc, CLIError):
        return ErrorInfo(type=exc.error_type, message=exc.message, hint=exc.hint, details=exc.details)
    if isinstance(exc, QueryParseError):
        return ErrorInfo(
            type="parse_error",
            message=exc.message,
            hint="Run `ygosearch fields` to list fields and operators.",
            details=exc.to_dict(),
        )
    if isinstance(exc, CardDataError):
        return ErrorInfo(
            type="data_error",
            message=exc.message,
            hint="Point --cards (or YGOSEARCH_CARDS) at a cards.json dump.",
            details={"path": exc.path},
        )
    if isinstance(exc, SearchTimeoutError):
        return ErrorInfo(
            type="timeout",
            message=exc.message,
            details={
                "timeoutSeconds": exc.timeout_seconds,
                "elapsedSeconds": round(exc.elapsed_seconds, 3),
                "partialResults": len(exc.partial_results),
            },
        )
    if isinstance(exc, YgoSearchError):
        return ErrorInfo(type=exc.__class__.__name__, message=str(exc))
    return ErrorInfo(type="internal_error", message=str(exc) or exc.__class__.__name__)


def build_result(
    *,
    ok: bool,
    command: str,
    started_at: float,
    data: Any | None,
    warnings: list[str],
    profile: str | None,
    query: str | None = None,
    description: str | None = None,
    scanned: int | None = None,
    truncated: bool | None = None,
    error: ErrorInfo | None = None,
) -> CommandResult:
    duration_ms = int(max(0.0, (time.time() - started_at) * 1000))
    meta = CommandMeta(
        duration_ms=duration_ms,
        profile=profile,
        query=query,
        description=description,
        scanned=scanned,
        truncated=truncated,
    )
    return CommandResult(
        ok=ok,
        command=command,
        data=data,
        warnings=warnings,
        meta=meta,
        error=error,
    )
