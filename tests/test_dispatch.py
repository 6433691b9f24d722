from __future__ import annotations

from pathlib import Path

import pytest

from ffmpeg_helper.config import AppConfig, OperationDefaults
from ffmpeg_helper.dispatch import OPERATIONS, Dispatcher, dispatch
from ffmpeg_helper.errors import ToolInvocationFailed
from ffmpeg_helper.operations.catalog import tool_names
from ffmpeg_helper.runner import Invocation


class _FakeRunner:
    def __init__(self, output: str = "ffmpeg output") -> None:
        self.output = output
        self.calls: list[Invocation] = []

    def __call__(self, invocation: Invocation) -> str:
        self.calls.append(invocation)
        return self.output


@pytest.fixture
def media(tmp_path: Path) -> dict[str, Path]:
    video = tmp_path / "clip.mp4"
    video.write_bytes(b"x")
    logo = tmp_path / "logo.png"
    logo.write_bytes(b"x")
    return {"video": video, "logo": logo, "root": tmp_path}


def _minimal_arguments(media: dict[str, Path]) -> dict[str, dict[str, object]]:
    root = media["root"]
    video = str(media["video"])
    return {
        "get_video_info": {"filePath": video},
        "convert_video": {"inputPath": video, "outputPath": str(root / "out" / "a.mkv")},
        "extract_audio": {"inputPath": video, "outputPath": str(root / "out" / "a.mp3"), "format": "mp3"},
        "create_video_from_images": {"inputPattern": str(root / "img%03d.png"), "outputPath": str(root / "out" / "b.mp4")},
        "trim_video": {"inputPath": video, "outputPath": str(root / "out" / "c.mp4")},
        "add_watermark": {
            "inputPath": video,
            "watermarkPath": str(media["logo"]),
            "outputPath": str(root / "out" / "d.mp4"),
        },
        "trim_audio": {"inputPath": video, "outputPath": str(root / "out" / "e.aac")},
        "extract_frames": {"inputPath": video, "outputDir": str(root / "frames")},
    }


def test_every_operation_succeeds_with_minimal_arguments(media: dict[str, Path]) -> None:
    runner = _FakeRunner()
    dispatcher = Dispatcher(runner=runner)

    for name, arguments in _minimal_arguments(media).items():
        result = dispatcher.dispatch(name, arguments)
        assert "Error:" not in result.text, (name, result.text)
        assert not result.is_error

    assert len(runner.calls) == len(OPERATIONS)


def test_catalog_and_dispatcher_expose_same_operations(media: dict[str, Path]) -> None:
    assert set(tool_names()) == set(OPERATIONS)
    assert set(_minimal_arguments(media)) == set(OPERATIONS)


def test_unknown_operation_is_reported_as_text() -> None:
    runner = _FakeRunner()
    result = Dispatcher(runner=runner).dispatch("resize_video", {"inputPath": "x"})
    assert result.text == "Error: Unknown tool: resize_video"
    assert runner.calls == []


def test_missing_input_is_reported_without_running_tool(tmp_path: Path) -> None:
    runner = _FakeRunner()
    missing = str(tmp_path / "nope.mp4")
    out_dir = tmp_path / "never"
    result = Dispatcher(runner=runner).dispatch(
        "convert_video",
        {"inputPath": missing, "outputPath": str(out_dir / "out.mp4")},
    )
    assert result.text == f"Error: Input file does not exist: {missing}"
    assert runner.calls == []
    assert not out_dir.exists()


def test_missing_output_path_is_reported(media: dict[str, Path]) -> None:
    result = Dispatcher(runner=_FakeRunner()).dispatch("trim_video", {"inputPath": str(media["video"])})
    assert result.text == "Error: File path is required: outputPath"


def test_missing_input_pattern_is_reported(tmp_path: Path) -> None:
    result = Dispatcher(runner=_FakeRunner()).dispatch(
        "create_video_from_images",
        {"outputPath": str(tmp_path / "out.mp4")},
    )
    assert result.text == "Error: Input pattern is required"


def test_summary_wraps_tool_output(media: dict[str, Path]) -> None:
    out = media["root"] / "out" / "a.mkv"
    result = Dispatcher(runner=_FakeRunner("done")).dispatch(
        "convert_video",
        {"inputPath": str(media["video"]), "outputPath": str(out)},
    )
    assert result.text == f"Video conversion completed: {media['video']} → {out}\n\ndone"


def test_get_video_info_returns_raw_output(media: dict[str, Path]) -> None:
    payload = '{"streams": []}'
    runner = _FakeRunner(payload)
    result = Dispatcher(runner=runner).dispatch("get_video_info", {"filePath": str(media["video"])})
    assert result.text == payload
    assert runner.calls[0].executable == "ffprobe"


def test_output_directories_are_created(media: dict[str, Path]) -> None:
    out = media["root"] / "deep" / "nested" / "a.mp4"
    frames = media["root"] / "frames" / "run1"
    dispatcher = Dispatcher(runner=_FakeRunner())

    dispatcher.dispatch("trim_video", {"inputPath": str(media["video"]), "outputPath": str(out)})
    dispatcher.dispatch("extract_frames", {"inputPath": str(media["video"]), "outputDir": str(frames)})

    assert out.parent.is_dir()
    assert frames.is_dir()


def test_repeat_calls_tolerate_existing_directories(media: dict[str, Path]) -> None:
    dispatcher = Dispatcher(runner=_FakeRunner())
    for name, arguments in _minimal_arguments(media).items():
        first = dispatcher.dispatch(name, arguments)
        second = dispatcher.dispatch(name, arguments)
        assert not first.is_error
        assert second.text == first.text


def test_output_prep_failure_is_reported(media: dict[str, Path]) -> None:
    blocker = media["root"] / "blocker"
    blocker.write_text("file, not a directory", encoding="utf-8")
    runner = _FakeRunner()

    result = Dispatcher(runner=runner).dispatch(
        "convert_video",
        {"inputPath": str(media["video"]), "outputPath": str(blocker / "out.mp4")},
    )
    assert result.text.startswith("Error: Cannot create output directory")
    assert runner.calls == []


def test_watermark_center_and_fallback_positions(media: dict[str, Path]) -> None:
    runner = _FakeRunner()
    dispatcher = Dispatcher(runner=runner)
    base = {
        "inputPath": str(media["video"]),
        "watermarkPath": str(media["logo"]),
        "outputPath": str(media["root"] / "wm.mp4"),
    }

    dispatcher.dispatch("add_watermark", {**base, "position": "center"})
    dispatcher.dispatch("add_watermark", {**base, "position": "bogus"})

    center_graph = runner.calls[0].args[runner.calls[0].args.index("-filter_complex") + 1]
    bogus_graph = runner.calls[1].args[runner.calls[1].args.index("-filter_complex") + 1]
    assert "overlay=(W-w)/2:(H-h)/2:" in center_graph
    assert "overlay=W-w-10:H-h-10:" in bogus_graph
    assert "colorchannelmixer=aa=0.5[" in bogus_graph


def test_watermark_requires_existing_image(media: dict[str, Path]) -> None:
    missing = str(media["root"] / "missing.png")
    result = Dispatcher(runner=_FakeRunner()).dispatch(
        "add_watermark",
        {"inputPath": str(media["video"]), "watermarkPath": missing, "outputPath": "wm.mp4"},
    )
    assert result.text == f"Error: Input file does not exist: {missing}"


def test_watermark_rejects_out_of_range_opacity(media: dict[str, Path]) -> None:
    result = Dispatcher(runner=_FakeRunner()).dispatch(
        "add_watermark",
        {
            "inputPath": str(media["video"]),
            "watermarkPath": str(media["logo"]),
            "outputPath": str(media["root"] / "wm.mp4"),
            "opacity": 1.5,
        },
    )
    assert result.text == "Error: opacity must be between 0.0 and 1.0, got 1.5"


@pytest.mark.parametrize(
    ("image_format", "quality", "flag", "expected"),
    [
        ("jpg", 100, "-q:v", "1"),
        ("jpg", 1, "-q:v", "31"),
        ("jpeg", 95, "-q:v", "3"),
        ("png", 100, "-compression_level", "0"),
    ],
)
def test_extract_frames_quality_mapping(
    media: dict[str, Path], image_format: str, quality: int, flag: str, expected: str
) -> None:
    runner = _FakeRunner()
    Dispatcher(runner=runner).dispatch(
        "extract_frames",
        {
            "inputPath": str(media["video"]),
            "outputDir": str(media["root"] / "frames"),
            "format": image_format,
            "quality": quality,
        },
    )
    args = runner.calls[0].args
    assert args[args.index(flag) + 1] == expected


def test_extract_frames_summary(media: dict[str, Path]) -> None:
    frames = media["root"] / "frames"
    result = Dispatcher(runner=_FakeRunner("ok")).dispatch(
        "extract_frames",
        {"inputPath": str(media["video"]), "outputDir": str(frames), "format": "png"},
    )
    assert result.text == f"Frames extracted from video: {media['video']} → {frames}/*.png\n\nok"


def test_trim_video_precedence_through_dispatch(media: dict[str, Path]) -> None:
    runner = _FakeRunner()
    dispatcher = Dispatcher(runner=runner)
    base = {"inputPath": str(media["video"]), "outputPath": str(media["root"] / "t.mp4")}

    dispatcher.dispatch("trim_video", {**base, "duration": "10", "endTime": "20"})
    dispatcher.dispatch("trim_video", {**base, "startTime": 3})

    both, neither = runner.calls
    assert "-t" in both.args and "-to" not in both.args
    assert both.args[both.args.index("-t") + 1] == "10"
    assert "-t" not in neither.args and "-to" not in neither.args
    assert neither.args[neither.args.index("-ss") + 1] == "3"


def test_defaults_come_from_config(media: dict[str, Path]) -> None:
    runner = _FakeRunner()
    config = AppConfig(defaults=OperationDefaults(audio_format="aac", video_codec="libx265"))
    dispatcher = Dispatcher(config, runner=runner)

    dispatcher.dispatch(
        "extract_audio",
        {"inputPath": str(media["video"]), "outputPath": str(media["root"] / "a.aac")},
    )
    dispatcher.dispatch(
        "create_video_from_images",
        {"inputPattern": "img%03d.png", "outputPath": str(media["root"] / "v.mp4")},
    )

    audio, video = runner.calls
    assert audio.args[audio.args.index("-acodec") + 1] == "aac"
    assert video.args[video.args.index("-c:v") + 1] == "libx265"
    assert video.args[video.args.index("-framerate") + 1] == "25"


def test_tool_failure_becomes_error_text(media: dict[str, Path]) -> None:
    def _broken(invocation: Invocation) -> str:
        raise ToolInvocationFailed("FFmpeg error: [Errno 2] No such file or directory: 'ffmpeg'")

    result = Dispatcher(runner=_broken).dispatch(
        "trim_audio",
        {"inputPath": str(media["video"]), "outputPath": str(media["root"] / "a.wav")},
    )
    assert result.text == "Error: FFmpeg error: [Errno 2] No such file or directory: 'ffmpeg'"


def test_unexpected_exception_becomes_error_text(media: dict[str, Path]) -> None:
    def _boom(invocation: Invocation) -> str:
        raise KeyError("surprise")

    result = Dispatcher(runner=_boom).dispatch("get_video_info", {"filePath": str(media["video"])})
    assert result.is_error
    assert "surprise" in result.text


def test_raw_options_are_tokenized(media: dict[str, Path]) -> None:
    runner = _FakeRunner()
    Dispatcher(runner=runner).dispatch(
        "convert_video",
        {
            "inputPath": str(media["video"]),
            "outputPath": str(media["root"] / "o.mp4"),
            "options": "-vf \"scale=640:-2\" -metadata title='My Clip; rm -rf /'",
        },
    )
    args = list(runner.calls[0].args)
    assert args[-1] == str(media["root"] / "o.mp4")
    assert "scale=640:-2" in args
    assert "title=My Clip; rm -rf /" in args


def test_unbalanced_options_are_rejected(media: dict[str, Path]) -> None:
    runner = _FakeRunner()
    result = Dispatcher(runner=runner).dispatch(
        "convert_video",
        {"inputPath": str(media["video"]), "outputPath": str(media["root"] / "o.mp4"), "options": "-vf 'oops"},
    )
    assert result.text.startswith("Error: options could not be parsed")
    assert runner.calls == []


def test_module_dispatch_validates_before_running(monkeypatch, tmp_path: Path) -> None:
    from ffmpeg_helper import runner as runner_mod

    def _never(*args, **kwargs):
        raise AssertionError("ffmpeg must not be started")

    monkeypatch.setattr(runner_mod.subprocess, "run", _never)
    missing = str(tmp_path / "missing.mp4")
    assert dispatch("get_video_info", {"filePath": missing}).text == f"Error: Input file does not exist: {missing}"
    assert dispatch("resize_video").text == "Error: Unknown tool: resize_video"
