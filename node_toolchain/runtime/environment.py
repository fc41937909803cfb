"""Read-only access to environment variables."""

from __future__ import annotations

import os
from collections.abc import Mapping


class Environment:
    """Environment variable lookup, backed by ``os.environ`` unless a mapping is given."""

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = environ

    def get(self, name: str) -> str | None:
        source = os.environ if self._environ is None else self._environ
        value = source.get(name)
        if value is None or not value.strip():
            return None
        return value
