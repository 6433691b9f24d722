from __future__ import annotations

from typing import Any


_TIME_HINT = "(format: HH:MM:SS.mmm or seconds)"


def _string(description: str) -> dict[str, str]:
    return {"type": "string", "description": description}


def _number(description: str) -> dict[str, str]:
    return {"type": "number", "description": description}


def _schema(properties: dict[str, dict[str, str]], required: list[str]) -> dict[str, Any]:
    return {"type": "object", "properties": properties, "required": required}


TOOL_DEFINITIONS: tuple[dict[str, Any], ...] = (
    {
        "name": "get_video_info",
        "description": "Get detailed information about a video file",
        "inputSchema": _schema(
            {"filePath": _string("Path to the video file")},
            ["filePath"],
        ),
    },
    {
        "name": "convert_video",
        "description": "Convert a video file to a different format",
        "inputSchema": _schema(
            {
                "inputPath": _string("Path to the input video file"),
                "outputPath": _string("Path for the output video file"),
                "options": _string("Additional FFmpeg options (optional)"),
            },
            ["inputPath", "outputPath"],
        ),
    },
    {
        "name": "extract_audio",
        "description": "Extract audio from a video file",
        "inputSchema": _schema(
            {
                "inputPath": _string("Path to the input video file"),
                "outputPath": _string("Path for the output audio file"),
                "format": _string("Audio format (mp3, aac, etc.)"),
            },
            ["inputPath", "outputPath", "format"],
        ),
    },
    {
        "name": "create_video_from_images",
        "description": "Create a video from a sequence of images",
        "inputSchema": _schema(
            {
                "inputPattern": _string("Pattern for input images (e.g., 'img%03d.jpg' or 'folder/*.png')"),
                "outputPath": _string("Path for the output video file"),
                "framerate": _number("Frames per second (default: 25)"),
                "codec": _string("Video codec to use (default: libx264)"),
                "pixelFormat": _string("Pixel format (default: yuv420p)"),
                "extraOptions": _string("Additional FFmpeg options"),
            },
            ["inputPattern", "outputPath"],
        ),
    },
    {
        "name": "trim_video",
        "description": "Trim a video to a specific duration",
        "inputSchema": _schema(
            {
                "inputPath": _string("Path to the input video file"),
                "outputPath": _string("Path for the output video file"),
                "startTime": _string(f"Start time {_TIME_HINT}"),
                "duration": _string(f"Duration {_TIME_HINT}"),
                "endTime": _string(f"End time {_TIME_HINT}"),
            },
            ["inputPath", "outputPath"],
        ),
    },
    {
        "name": "add_watermark",
        "description": "Add a watermark to a video",
        "inputSchema": _schema(
            {
                "inputPath": _string("Path to the input video file"),
                "watermarkPath": _string("Path to the watermark image"),
                "outputPath": _string("Path for the output video file"),
                "position": _string("Position of watermark (topleft, topright, bottomleft, bottomright, center)"),
                "opacity": _number("Opacity of watermark (0.0-1.0)"),
            },
            ["inputPath", "watermarkPath", "outputPath"],
        ),
    },
    {
        "name": "trim_audio",
        "description": "Trim an audio file to a specific duration",
        "inputSchema": _schema(
            {
                "inputPath": _string("Path to the input audio file"),
                "outputPath": _string("Path for the output audio file"),
                "startTime": _string(f"Start time {_TIME_HINT}"),
                "duration": _string(f"Duration {_TIME_HINT}"),
                "endTime": _string(f"End time {_TIME_HINT}"),
                "format": _string("Audio format for output (mp3, aac, etc.)"),
            },
            ["inputPath", "outputPath"],
        ),
    },
    {
        "name": "extract_frames",
        "description": "Extract frames from a video as sequential image files",
        "inputSchema": _schema(
            {
                "inputPath": _string("Path to the input video file"),
                "outputDir": _string("Directory to save the extracted frames (default: 'output')"),
                "frameRate": _string(
                    "Frame extraction rate (e.g., '1' for every frame, '0.5' for every 2nd frame, "
                    "'1/30' for 1 frame per 30 seconds)"
                ),
                "format": _string("Output image format (jpg, png, etc., default: jpg)"),
                "quality": _number("Image quality for jpg format (1-100, default: 95)"),
                "startTime": _string(f"Start time to begin extraction {_TIME_HINT}"),
                "duration": _string(f"Duration to extract frames {_TIME_HINT}"),
            },
            ["inputPath"],
        ),
    },
)


def tool_names() -> tuple[str, ...]:
    return tuple(d["name"] for d in TOOL_DEFINITIONS)
