"""Config file loading and auto-discovery for cluster-view.

The CLI looks for ``cluster-view.yaml`` next to the working directory or in
any directory above it, so an operator can keep one file at the root of a
checkout that points at the shared cache file and accounts file. Paths in
the file are relative to the file itself.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

CONFIG_FILENAME = "cluster-view.yaml"
DEFAULT_LOG_LEVEL = "WARNING"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ClusterViewConfig:
    """Settings for the cache file, the accounts file, and describe calls."""

    config_path: Path | None = None
    cache: str | None = None
    accounts: str | None = None
    endpoint_url: str | None = None
    max_workers: int = 1
    include: list[str] = field(default_factory=list)
    log_level: str = DEFAULT_LOG_LEVEL


def find_config(start: Path | None = None) -> Path | None:
    """Locate the nearest ``cluster-view.yaml`` at or above *start*.

    *start* defaults to the working directory. Directories named like the
    config file are ignored.
    """
    origin = (start or Path.cwd()).resolve()
    for directory in (origin, *origin.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def load_config(
    path: str | Path | None = None,
    *,
    auto_discover: bool = True,
) -> ClusterViewConfig:
    """Load cluster-view settings.

    An explicit *path* must exist. Without one, the nearest
    ``cluster-view.yaml`` is used when *auto_discover* is set; if none is
    found, every setting keeps its default (sequential describe calls, no
    extra include fields, WARNING logging).

    Raises:
        FileNotFoundError: If an explicit *path* does not exist.
        ValueError: If the file is not a mapping or a setting is invalid.
    """
    if path is not None:
        config_path = Path(path).resolve()
        if not config_path.is_file():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        return _parse_config(config_path)

    discovered = find_config() if auto_discover else None
    if discovered is None:
        return ClusterViewConfig()
    return _parse_config(discovered)


def _parse_config(config_path: Path) -> ClusterViewConfig:
    """Read a YAML config file and validate every setting."""
    text = config_path.read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}

    if not isinstance(data, dict):
        msg = f"Expected a YAML mapping in {config_path}, got {type(data).__name__}"
        raise ValueError(msg)

    base = config_path.parent

    def _resolve(key: str) -> str | None:
        val = data.get(key)
        if val is None:
            return None
        if not isinstance(val, str):
            msg = f"'{key}' must be a path string in {config_path}"
            raise ValueError(msg)
        return str((base / val).resolve())

    endpoint_url = data.get("endpoint_url")
    if endpoint_url is not None and not isinstance(endpoint_url, str):
        msg = f"'endpoint_url' must be a string in {config_path}"
        raise ValueError(msg)

    max_workers = data.get("max_workers", 1)
    if not isinstance(max_workers, int) or isinstance(max_workers, bool) or max_workers < 1:
        msg = f"'max_workers' must be a positive integer in {config_path}"
        raise ValueError(msg)

    include = data.get("include") or []
    if not isinstance(include, list):
        msg = f"'include' must be a list in {config_path}"
        raise ValueError(msg)

    log_level = str(data.get("log_level", DEFAULT_LOG_LEVEL)).upper()
    if log_level not in LOG_LEVELS:
        msg = (
            f"'log_level' must be one of {', '.join(LOG_LEVELS)} in {config_path}, "
            f"got {data.get('log_level')!r}"
        )
        raise ValueError(msg)

    return ClusterViewConfig(
        config_path=config_path,
        cache=_resolve("cache"),
        accounts=_resolve("accounts"),
        endpoint_url=endpoint_url,
        max_workers=max_workers,
        include=[str(item) for item in include],
        log_level=log_level,
    )
