from __future__ import annotations

import os
from pathlib import Path

DEFAULT_MATCH_LIMIT = 20
DEFAULT_TOP_ARTIST_MIN_COUNT = 3


def load_local_env_file(env_path: str = ".env") -> None:
    """Load key=value pairs from a local .env file into process env.

    Lines may carry a shell-style ``export`` prefix. Variables already set
    in the environment win over the file.
    """

    path = Path(env_path)
    if not path.is_file():
        return

    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if line.startswith("export "):
            line = line[len("export "):].lstrip()
        if not line or line.startswith("#") or "=" not in line:
            continue

        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")

        if key and key not in os.environ:
            os.environ[key] = value


def env_int(name: str, fallback: int) -> int:
    """Read an integer env variable; unset, blank or non-numeric values give ``fallback``."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return fallback
    try:
        return int(raw)
    except ValueError:
        return fallback
