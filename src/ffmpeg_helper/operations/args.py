from __future__ import annotations

from dataclasses import dataclass
import math
import shlex
from typing import Any, Mapping

from ffmpeg_helper.config import OperationDefaults
from ffmpeg_helper.errors import InvalidArgument, MissingArgument
from ffmpeg_helper.utils.paths import validate_input_path, validate_output_path


def _is_absent(value: Any) -> bool:
    return value is None or value == ""


def _text(arguments: Mapping[str, Any], key: str, default: str = "") -> str:
    value = arguments.get(key)
    if _is_absent(value):
        return default
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _number(arguments: Mapping[str, Any], key: str, default: float) -> float:
    value = arguments.get(key)
    if _is_absent(value):
        return float(default)
    if isinstance(value, bool):
        raise InvalidArgument(f"{key} must be a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidArgument(f"{key} must be a number, got {value!r}") from exc
    if not math.isfinite(number):
        raise InvalidArgument(f"{key} must be a finite number, got {value!r}")
    return number


def _tokens(arguments: Mapping[str, Any], key: str) -> tuple[str, ...]:
    raw = _text(arguments, key)
    try:
        return tuple(shlex.split(raw))
    except ValueError as exc:
        raise InvalidArgument(f"{key} could not be parsed: {exc}") from exc


def _input(arguments: Mapping[str, Any], key: str) -> str:
    return validate_input_path(_text(arguments, key), key)


def _output(arguments: Mapping[str, Any], key: str) -> str:
    return validate_output_path(_text(arguments, key), key)


@dataclass(frozen=True)
class GetInfoArgs:
    file_path: str

    @classmethod
    def from_arguments(cls, arguments: Mapping[str, Any], defaults: OperationDefaults) -> "GetInfoArgs":
        return cls(file_path=_input(arguments, "filePath"))


@dataclass(frozen=True)
class ConvertArgs:
    input_path: str
    output_path: str
    options: tuple[str, ...] = ()

    @classmethod
    def from_arguments(cls, arguments: Mapping[str, Any], defaults: OperationDefaults) -> "ConvertArgs":
        return cls(
            input_path=_input(arguments, "inputPath"),
            output_path=_output(arguments, "outputPath"),
            options=_tokens(arguments, "options"),
        )


@dataclass(frozen=True)
class ExtractAudioArgs:
    input_path: str
    output_path: str
    format: str

    @classmethod
    def from_arguments(cls, arguments: Mapping[str, Any], defaults: OperationDefaults) -> "ExtractAudioArgs":
        return cls(
            input_path=_input(arguments, "inputPath"),
            output_path=_output(arguments, "outputPath"),
            format=_text(arguments, "format", defaults.audio_format),
        )


@dataclass(frozen=True)
class CreateFromImagesArgs:
    input_pattern: str
    output_path: str
    framerate: float
    codec: str
    pixel_format: str
    extra_options: tuple[str, ...] = ()

    @classmethod
    def from_arguments(cls, arguments: Mapping[str, Any], defaults: OperationDefaults) -> "CreateFromImagesArgs":
        output_path = _output(arguments, "outputPath")
        input_pattern = _text(arguments, "inputPattern")
        if not input_pattern:
            raise MissingArgument("Input pattern is required")
        framerate = _number(arguments, "framerate", defaults.framerate)
        if framerate <= 0:
            raise InvalidArgument(f"framerate must be positive, got {framerate:g}")
        return cls(
            input_pattern=input_pattern,
            output_path=output_path,
            framerate=framerate,
            codec=_text(arguments, "codec", defaults.video_codec),
            pixel_format=_text(arguments, "pixelFormat", defaults.pixel_format),
            extra_options=_tokens(arguments, "extraOptions"),
        )


@dataclass(frozen=True)
class TrimVideoArgs:
    input_path: str
    output_path: str
    start_time: str
    duration: str = ""
    end_time: str = ""

    @classmethod
    def from_arguments(cls, arguments: Mapping[str, Any], defaults: OperationDefaults) -> "TrimVideoArgs":
        return cls(
            input_path=_input(arguments, "inputPath"),
            output_path=_output(arguments, "outputPath"),
            start_time=_text(arguments, "startTime", defaults.start_time),
            duration=_text(arguments, "duration"),
            end_time=_text(arguments, "endTime"),
        )


@dataclass(frozen=True)
class TrimAudioArgs:
    input_path: str
    output_path: str
    start_time: str
    duration: str = ""
    end_time: str = ""
    format: str = ""

    @classmethod
    def from_arguments(cls, arguments: Mapping[str, Any], defaults: OperationDefaults) -> "TrimAudioArgs":
        return cls(
            input_path=_input(arguments, "inputPath"),
            output_path=_output(arguments, "outputPath"),
            start_time=_text(arguments, "startTime", defaults.start_time),
            duration=_text(arguments, "duration"),
            end_time=_text(arguments, "endTime"),
            format=_text(arguments, "format"),
        )


@dataclass(frozen=True)
class AddWatermarkArgs:
    input_path: str
    watermark_path: str
    output_path: str
    position: str
    opacity: float

    @classmethod
    def from_arguments(cls, arguments: Mapping[str, Any], defaults: OperationDefaults) -> "AddWatermarkArgs":
        input_path = _input(arguments, "inputPath")
        watermark_path = _input(arguments, "watermarkPath")
        output_path = _output(arguments, "outputPath")
        opacity = _number(arguments, "opacity", defaults.watermark_opacity)
        if not 0.0 <= opacity <= 1.0:
            raise InvalidArgument(f"opacity must be between 0.0 and 1.0, got {opacity:g}")
        return cls(
            input_path=input_path,
            watermark_path=watermark_path,
            output_path=output_path,
            position=_text(arguments, "position", defaults.watermark_position),
            opacity=opacity,
        )


@dataclass(frozen=True)
class ExtractFramesArgs:
    input_path: str
    output_dir: str
    frame_rate: str
    format: str
    quality: float
    start_time: str = ""
    duration: str = ""

    @classmethod
    def from_arguments(cls, arguments: Mapping[str, Any], defaults: OperationDefaults) -> "ExtractFramesArgs":
        return cls(
            input_path=_input(arguments, "inputPath"),
            output_dir=_text(arguments, "outputDir", defaults.frames_output_dir),
            frame_rate=_text(arguments, "frameRate", defaults.frame_rate),
            format=_text(arguments, "format", defaults.frame_format),
            quality=_number(arguments, "quality", defaults.frame_quality),
            start_time=_text(arguments, "startTime"),
            duration=_text(arguments, "duration"),
        )
