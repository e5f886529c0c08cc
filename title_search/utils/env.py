from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

ENV_FILE_VARIABLE = "TITLE_SEARCH_ENV_FILE"


def _candidates() -> list[Path]:
    explicit = (os.getenv(ENV_FILE_VARIABLE) or "").strip()
    if explicit:
        return [Path(explicit).expanduser()]
    repo_root = Path(__file__).resolve().parents[2]
    return [repo_root / ".env", Path.cwd() / ".env"]


def load_env(*, override: bool = False) -> Path | None:
    """
    Load search credentials and settings from the first `.env` found.

    `TITLE_SEARCH_ENV_FILE` pins the file; otherwise the repo root is tried
    before the working directory. Returns the loaded path, or `None`.
    """
    for path in _candidates():
        if path.is_file():
            load_dotenv(dotenv_path=path, override=override)
            logger.debug(f"Loaded environment from {path}")
            return path
    logger.debug("No .env file found; using the process environment only")
    return None
