"""Path utilities (safe resolution of archive entry names)."""

from __future__ import annotations
from pathlib import Path

__all__ = ["safe_file_path"]


def safe_file_path(base_dir: Path, name: str) -> Path:
    """Resolve entry ``name`` under ``base_dir``; ValueError if it escapes."""
    base_dir = base_dir.resolve()
    resolved = (base_dir / name.replace("\\", "/")).resolve()
    resolved.relative_to(base_dir)  # raises ValueError if escapes
    if resolved == base_dir:
        raise ValueError(f"Entry name {name!r} does not name a file")
    return resolved
