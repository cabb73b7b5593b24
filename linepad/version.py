from __future__ import annotations

import importlib.metadata
from typing import Optional


def get_installed_version(distribution: str = "linepad") -> Optional[str]:
    try:
        return importlib.metadata.version(distribution)
    except importlib.metadata.PackageNotFoundError:
        return None


def get_version_string() -> str:
    return get_installed_version() or "unknown"
