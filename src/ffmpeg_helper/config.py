from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Any


CONFIG_ENV_VAR = "FFMPEG_HELPER_CONFIG"

WATERMARK_POSITIONS = ("topleft", "topright", "bottomleft", "bottomright", "center")


@dataclass
class ToolConfig:
    ffmpeg: str = "ffmpeg"
    ffprobe: str = "ffprobe"
    hide_banner: bool = True
    fail_on_tool_error: bool = False


@dataclass
class OperationDefaults:
    audio_format: str = "mp3"
    framerate: float = 25
    video_codec: str = "libx264"
    pixel_format: str = "yuv420p"
    start_time: str = "0"
    watermark_position: str = "bottomright"
    watermark_opacity: float = 0.5
    frames_output_dir: str = "output"
    frame_rate: str = "1"
    frame_format: str = "jpg"
    frame_quality: float = 95


@dataclass
class AppConfig:
    tools: ToolConfig = field(default_factory=ToolConfig)
    defaults: OperationDefaults = field(default_factory=OperationDefaults)
    log_level: str = "INFO"
    log_file: Path | None = None


def _expand_path(value: str | None, base: Path) -> Path | None:
    if value in (None, ""):
        return None
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = (base / path).resolve()
    return path


def _section(raw: dict[str, Any], key: str) -> dict[str, Any]:
    value = raw.get(key) or {}
    if not isinstance(value, dict):
        raise ValueError(f"config section '{key}' must be a mapping")
    return value


def _as_bool(value: Any, key: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text in {"1", "true", "yes", "on"}:
            return True
        if text in {"0", "false", "no", "off"}:
            return False
    raise ValueError(f"config key '{key}' must be a boolean")


def _validate_defaults(defaults: OperationDefaults) -> None:
    if defaults.framerate <= 0:
        raise ValueError("defaults.framerate must be positive")
    if not 0.0 <= defaults.watermark_opacity <= 1.0:
        raise ValueError("defaults.watermark_opacity must be between 0 and 1")
    if defaults.watermark_position.lower() not in WATERMARK_POSITIONS:
        raise ValueError(
            "defaults.watermark_position must be one of: " + ", ".join(WATERMARK_POSITIONS)
        )
    if not 1 <= defaults.frame_quality <= 100:
        raise ValueError("defaults.frame_quality must be between 1 and 100")


def load_config(path: str | Path) -> AppConfig:
    try:
        import yaml  # type: ignore
    except Exception as exc:
        raise RuntimeError("PyYAML is required for config loading. Install with: pip install PyYAML") from exc

    cfg_path = Path(path).expanduser().resolve()
    with cfg_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"config file must contain a mapping: {cfg_path}")

    base = cfg_path.parent
    tools_raw = _section(raw, "tools")
    defaults_raw = _section(raw, "defaults")

    tools = ToolConfig(
        ffmpeg=str(tools_raw.get("ffmpeg", "ffmpeg")),
        ffprobe=str(tools_raw.get("ffprobe", "ffprobe")),
        hide_banner=_as_bool(tools_raw.get("hide_banner", True), "tools.hide_banner"),
        fail_on_tool_error=_as_bool(tools_raw.get("fail_on_tool_error", False), "tools.fail_on_tool_error"),
    )

    defaults = OperationDefaults(
        audio_format=str(defaults_raw.get("audio_format", "mp3")),
        framerate=float(defaults_raw.get("framerate", 25)),
        video_codec=str(defaults_raw.get("video_codec", "libx264")),
        pixel_format=str(defaults_raw.get("pixel_format", "yuv420p")),
        start_time=str(defaults_raw.get("start_time", "0")),
        watermark_position=str(defaults_raw.get("watermark_position", "bottomright")),
        watermark_opacity=float(defaults_raw.get("watermark_opacity", 0.5)),
        frames_output_dir=str(defaults_raw.get("frames_output_dir", "output")),
        frame_rate=str(defaults_raw.get("frame_rate", "1")),
        frame_format=str(defaults_raw.get("frame_format", "jpg")),
        frame_quality=float(defaults_raw.get("frame_quality", 95)),
    )
    _validate_defaults(defaults)

    app = AppConfig(
        tools=tools,
        defaults=defaults,
        log_level=str(raw.get("log_level", "INFO")),
        log_file=_expand_path(raw.get("log_file"), base),
    )

    ensure_dirs(app)
    return app


def resolve_config(path: str | Path | None = None) -> AppConfig:
    """Load the config named on the command line, then the env var, else built-in defaults."""
    chosen = path or os.environ.get(CONFIG_ENV_VAR)
    if not chosen:
        return AppConfig()
    return load_config(chosen)


def ensure_dirs(config: AppConfig) -> None:
    if config.log_file is not None:
        config.log_file.parent.mkdir(parents=True, exist_ok=True)
