from __future__ import annotations

import os
from pathlib import Path

from dotenv import dotenv_values

from codeassist.core.config import settings


class MissingApiKeyError(RuntimeError):
    def __init__(self, key: str) -> None:
        super().__init__(f"{key} is missing in environment or .env")
        self.key = key


def _iter_env_files() -> list[Path]:
    env_file = settings.model_config.get('env_file')
    if not env_file:
        return []
    if isinstance(env_file, (list, tuple)):
        return [Path(item) for item in env_file]
    return [Path(env_file)]


def _read_env_file(path: Path) -> dict[str, str]:
    if not path.is_file():
        return {}
    return {key: value for key, value in dotenv_values(path).items() if value}


def get_env_value(key: str) -> str | None:
    """Look up ``key`` in the configured ``.env`` files, then the process environment.

    When at least one ``.env`` file exists it is authoritative: a key missing
    from it resolves to ``None`` even if the environment carries one.
    """
    env_files = [path for path in _iter_env_files() if path.is_file()]
    if env_files:
        for path in env_files:
            value = _read_env_file(path).get(key)
            if value:
                return value
        return None
    value = os.getenv(key)
    return value if value else None


def require_env_value(key: str) -> str:
    value = get_env_value(key)
    if not value:
        raise MissingApiKeyError(key)
    return value
