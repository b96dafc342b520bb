from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv


def _dotenv_path() -> Path:
    explicit = os.getenv("FIBERLATENCY_DOTENV")
    if explicit:
        return Path(explicit)
    # backend/fiberlatency/__init__.py -> backend -> repo root
    return Path(__file__).resolve().parents[2] / ".env"


def _load_dotenv() -> None:
    env_path = _dotenv_path()
    if env_path.is_file():
        # Real environment variables win over the file.
        load_dotenv(env_path, override=False)


_load_dotenv()


def configure_logging() -> None:
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
