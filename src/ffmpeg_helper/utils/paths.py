from __future__ import annotations

import logging
from pathlib import Path

from ffmpeg_helper.errors import InputNotFound, MissingArgument, OutputPrepFailed


logger = logging.getLogger(__name__)


def validate_input_path(value: str, arg_name: str) -> str:
    if not value:
        raise MissingArgument(f"File path is required: {arg_name}")
    if not Path(value).exists():
        raise InputNotFound(value)
    return value


def validate_output_path(value: str, arg_name: str) -> str:
    if not value:
        raise MissingArgument(f"File path is required: {arg_name}")
    return value


def ensure_directory(directory: str | Path) -> Path:
    path = Path(directory)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise OutputPrepFailed(f"Cannot create output directory {path}: {exc}") from exc
    return path


def ensure_parent_directory(file_path: str | Path) -> Path:
    parent = Path(file_path).parent
    logger.debug("ensuring output directory %s", parent)
    return ensure_directory(parent)
