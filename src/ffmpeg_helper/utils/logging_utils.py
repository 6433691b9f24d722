from __future__ import annotations

import logging
from pathlib import Path
import sys


# the SDK reports every JSON-RPC request at INFO
_SDK_LOGGER = "mcp"


def configure_logging(level: str, log_file: Path | None = None) -> None:
    resolved_level = getattr(logging, level.upper(), logging.INFO)
    # stdout carries the MCP stream
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=resolved_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        handlers=handlers,
        force=True,
    )

    sdk_level = resolved_level if resolved_level <= logging.DEBUG else max(resolved_level, logging.WARNING)
    logging.getLogger(_SDK_LOGGER).setLevel(sdk_level)
