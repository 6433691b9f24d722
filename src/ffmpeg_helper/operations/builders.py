from __future__ import annotations

import math
from pathlib import Path

from ffmpeg_helper.config import ToolConfig
from ffmpeg_helper.operations.args import (
    AddWatermarkArgs,
    ConvertArgs,
    CreateFromImagesArgs,
    ExtractAudioArgs,
    ExtractFramesArgs,
    GetInfoArgs,
    TrimAudioArgs,
    TrimVideoArgs,
)
from ffmpeg_helper.runner import Invocation


OVERLAY_POSITIONS = {
    "topleft": "10:10",
    "topright": "W-w-10:10",
    "bottomleft": "10:H-h-10",
    "center": "(W-w)/2:(H-h)/2",
    "bottomright": "W-w-10:H-h-10",
}
DEFAULT_OVERLAY_POSITION = OVERLAY_POSITIONS["bottomright"]

FRAME_NUMBER_PATTERN = "%05d"


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def jpeg_qscale(quality: float) -> int:
    """Map 1-100 (higher is better) onto ffmpeg's inverted 1-31 JPEG qscale."""
    return max(1, min(31, _round_half_up(31 - (quality / 100) * 30)))


def png_compression_level(quality: float) -> int:
    return max(0, min(9, _round_half_up(9 - (quality / 100) * 9)))


def overlay_position(position: str) -> str:
    return OVERLAY_POSITIONS.get(position.lower(), DEFAULT_OVERLAY_POSITION)


def frames_output_pattern(output_dir: str, image_format: str) -> str:
    return str(Path(output_dir) / f"{FRAME_NUMBER_PATTERN}.{image_format}")


def _ffmpeg(tools: ToolConfig, tokens: list[str]) -> Invocation:
    head = ["-y"]
    if tools.hide_banner:
        head.append("-hide_banner")
    return Invocation(executable=tools.ffmpeg, args=tuple(head + tokens))


def _trim_window(start_time: str, duration: str, end_time: str) -> list[str]:
    tokens = ["-ss", start_time]
    if duration:
        tokens += ["-t", duration]
    elif end_time:
        tokens += ["-to", end_time]
    return tokens


def build_get_info(args: GetInfoArgs, tools: ToolConfig) -> Invocation:
    return Invocation(
        executable=tools.ffprobe,
        args=(
            "-v",
            "error",
            "-show_format",
            "-show_streams",
            "-print_format",
            "json",
            args.file_path,
        ),
    )


def build_convert(args: ConvertArgs, tools: ToolConfig) -> Invocation:
    return _ffmpeg(tools, ["-i", args.input_path, *args.options, args.output_path])


def build_extract_audio(args: ExtractAudioArgs, tools: ToolConfig) -> Invocation:
    return _ffmpeg(tools, ["-i", args.input_path, "-vn", "-acodec", args.format, args.output_path])


def build_create_from_images(args: CreateFromImagesArgs, tools: ToolConfig) -> Invocation:
    return _ffmpeg(
        tools,
        [
            "-framerate",
            format_number(args.framerate),
            "-i",
            args.input_pattern,
            "-c:v",
            args.codec,
            "-pix_fmt",
            args.pixel_format,
            *args.extra_options,
            args.output_path,
        ],
    )


def build_trim_video(args: TrimVideoArgs, tools: ToolConfig) -> Invocation:
    tokens = ["-i", args.input_path]
    tokens += _trim_window(args.start_time, args.duration, args.end_time)
    tokens += ["-c", "copy", args.output_path]
    return _ffmpeg(tools, tokens)


def watermark_filter(position: str, opacity: float) -> str:
    return (
        f"[1:v]format=rgba,colorchannelmixer=aa={format_number(opacity)}[watermark];"
        f"[0:v][watermark]overlay={overlay_position(position)}:format=auto,format=yuv420p"
    )


def build_add_watermark(args: AddWatermarkArgs, tools: ToolConfig) -> Invocation:
    return _ffmpeg(
        tools,
        [
            "-i",
            args.input_path,
            "-i",
            args.watermark_path,
            "-filter_complex",
            watermark_filter(args.position, args.opacity),
            "-codec:a",
            "copy",
            args.output_path,
        ],
    )


def build_trim_audio(args: TrimAudioArgs, tools: ToolConfig) -> Invocation:
    tokens = ["-i", args.input_path]
    tokens += _trim_window(args.start_time, args.duration, args.end_time)
    tokens += ["-acodec", args.format or "copy", args.output_path]
    return _ffmpeg(tools, tokens)


def build_extract_frames(args: ExtractFramesArgs, tools: ToolConfig) -> Invocation:
    tokens = ["-i", args.input_path]
    if args.start_time:
        tokens += ["-ss", args.start_time]
    if args.duration:
        tokens += ["-t", args.duration]
    tokens += ["-vf", f"fps={args.frame_rate}"]

    image_format = args.format.lower()
    if image_format in ("jpg", "jpeg"):
        tokens += ["-q:v", str(jpeg_qscale(args.quality))]
    elif image_format == "png":
        tokens += ["-compression_level", str(png_compression_level(args.quality))]

    tokens.append(frames_output_pattern(args.output_dir, args.format))
    return _ffmpeg(tools, tokens)
