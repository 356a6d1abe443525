"""Configuration: creation options, environment settings and pack lists."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List

import yaml

from .packing.constants import SUPPORTED_VERSIONS
from .packing.errors import E_OPTIONS, OptionsError

__all__ = [
    "ArchiveOptions",
    "Settings",
    "PackList",
    "load_settings",
    "default_options",
    "load_pack_list",
]

DEFAULT_VERSION = 2


def _check_version(version: Any) -> int:
    try:
        v = int(version)
    except (TypeError, ValueError) as e:
        raise OptionsError(
            code=E_OPTIONS,
            message=f"Archive version must be an integer, got {version!r}",
        ) from e
    if v not in SUPPORTED_VERSIONS:
        raise OptionsError(
            code=E_OPTIONS,
            message=f"Unsupported archive version {v}",
            context={"supported": list(SUPPORTED_VERSIONS)},
        )
    return v


@dataclass(slots=True)
class ArchiveOptions:
    version: int = DEFAULT_VERSION

    def __post_init__(self) -> None:
        self.version = _check_version(self.version)


@dataclass(slots=True)
class Settings:
    version: int = DEFAULT_VERSION
    progress_transient: bool = False


def _is_truthy(val: str | None) -> bool:
    if val is None:
        return False
    return val.lower() in {"1", "true", "yes", "on"}


def load_settings(environ: dict[str, str] | None = None) -> Settings:
    env = os.environ if environ is None else environ
    version = env.get("GAMEDAT_VERSION")
    return Settings(
        version=_check_version(version) if version else DEFAULT_VERSION,
        progress_transient=_is_truthy(env.get("GAMEDAT_PROGRESS_TRANSIENT")),
    )


def default_options(settings: Settings | None = None) -> ArchiveOptions:
    settings = settings or load_settings()
    return ArchiveOptions(version=settings.version)


@dataclass(slots=True)
class PackList:
    files: List[Path] = field(default_factory=list)
    version: int | None = None


def load_pack_list(path: str | Path) -> PackList:
    """Load a JSON or YAML pack list ``{version: 1|2, files: [...]}``.

    Relative file paths are resolved against the list's directory.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(p)
    text = p.read_text(encoding="utf-8")
    if p.suffix.lower() in {".yaml", ".yml"}:
        data: Any = yaml.safe_load(text)
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise OptionsError(
            code=E_OPTIONS,
            message="Root of pack list must be an object",
            context={"path": str(p)},
        )
    files = data.get("files")
    if not isinstance(files, list) or not all(isinstance(x, str) for x in files):
        raise OptionsError(
            code=E_OPTIONS,
            message="Pack list 'files' must be a list of paths",
            context={"path": str(p)},
        )
    version = data.get("version")
    return PackList(
        files=[p.parent / f for f in files],
        version=_check_version(version) if version is not None else None,
    )
