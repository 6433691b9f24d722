from __future__ import annotations

import argparse
import json
import logging
import shutil
import sys
from typing import Any

from ffmpeg_helper import __version__
from ffmpeg_helper.config import CONFIG_ENV_VAR, AppConfig, resolve_config
from ffmpeg_helper.dispatch import Dispatcher
from ffmpeg_helper.operations.catalog import TOOL_DEFINITIONS
from ffmpeg_helper.utils.logging_utils import configure_logging


logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mcp-ffmpeg-helper")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config",
        default=None,
        help=f"Path to YAML config (default: ${CONFIG_ENV_VAR} or built-in defaults)",
    )
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("serve", help="Run the MCP server on stdio (default)")

    tools = sub.add_parser("tools", help="List the available operations")
    tools.add_argument("--json", action="store_true", help="Emit the full tool catalog as JSON")

    call = sub.add_parser("call", help="Run one operation locally and print its result")
    call.add_argument("name", help="Operation name, e.g. trim_video")
    call.add_argument("--args", default=None, help="JSON object of arguments (default: read from stdin)")

    health = sub.add_parser("health", help="Check that ffmpeg and ffprobe can be found")
    health.add_argument("--json", action="store_true", help="Emit machine-readable JSON")

    return parser


def _read_arguments(raw: str | None) -> dict[str, Any]:
    if raw is None:
        raw = sys.stdin.read()
    if not raw.strip():
        return {}
    payload = json.loads(raw)
    if not isinstance(payload, dict):
        raise ValueError("arguments JSON payload must be an object")
    return payload


def health_payload(config: AppConfig) -> dict[str, object]:
    ffmpeg = shutil.which(config.tools.ffmpeg)
    ffprobe = shutil.which(config.tools.ffprobe)
    return {
        "version": __version__,
        "ok": ffmpeg is not None and ffprobe is not None,
        "checks": {
            "ffmpeg": ffmpeg,
            "ffprobe": ffprobe,
        },
        "fail_on_tool_error": config.tools.fail_on_tool_error,
    }


def _cmd_serve(config: AppConfig) -> int:
    from ffmpeg_helper.server import run

    run(config)
    return 0


def _cmd_tools(args: argparse.Namespace) -> int:
    if args.json:
        print(json.dumps(list(TOOL_DEFINITIONS), indent=2))
        return 0
    for definition in TOOL_DEFINITIONS:
        required = ", ".join(definition["inputSchema"].get("required", []))
        print(f"{definition['name']:<26} {definition['description']}")
        print(f"{'':<26} required: {required}")
    return 0


def _cmd_call(args: argparse.Namespace, config: AppConfig) -> int:
    arguments = _read_arguments(args.args)
    result = Dispatcher(config).dispatch(args.name, arguments)
    print(result.text)
    return 1 if result.is_error else 0


def _cmd_health(args: argparse.Namespace, config: AppConfig) -> int:
    payload = health_payload(config)
    if args.json:
        print(json.dumps(payload, indent=2))
        return 0 if payload["ok"] else 1

    checks = payload["checks"]
    assert isinstance(checks, dict)
    print(f"mcp-ffmpeg-helper {payload['version']}")
    for name, location in checks.items():
        print(f"  {name:>8}: {location or 'NOT FOUND'}")
    return 0 if payload["ok"] else 1


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = resolve_config(args.config)
        configure_logging(config.log_level, config.log_file)

        if args.command in (None, "serve"):
            return _cmd_serve(config)
        if args.command == "tools":
            return _cmd_tools(args)
        if args.command == "call":
            return _cmd_call(args, config)
        if args.command == "health":
            return _cmd_health(args, config)

        parser.error(f"unknown command: {args.command}")
        return 2
    except Exception as exc:
        logger.exception("fatal error")
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
