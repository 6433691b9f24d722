from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Callable, Mapping

from ffmpeg_helper.config import AppConfig
from ffmpeg_helper.errors import MediaOperationError, UnknownOperation
from ffmpeg_helper.operations import builders
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
from ffmpeg_helper.runner import Invocation, ToolRunner
from ffmpeg_helper.utils.paths import ensure_directory, ensure_parent_directory


logger = logging.getLogger(__name__)

Runner = Callable[[Invocation], str]


@dataclass(frozen=True)
class OperationResult:
    text: str

    @property
    def is_error(self) -> bool:
        return self.text.startswith("Error: ")


@dataclass(frozen=True)
class Operation:
    name: str
    parse: Callable[..., Any]
    build: Callable[..., Invocation]
    prepare: Callable[[Any], None] | None
    summary: Callable[[Any], str] | None


def _parent_of(attr: str) -> Callable[[Any], None]:
    def prepare(args: Any) -> None:
        ensure_parent_directory(getattr(args, attr))

    return prepare


def _summary(label: str, source: str, target: str) -> Callable[[Any], str]:
    def summary(args: Any) -> str:
        return f"{label}: {getattr(args, source)} → {getattr(args, target)}"

    return summary


def _frames_summary(args: ExtractFramesArgs) -> str:
    return f"Frames extracted from video: {args.input_path} → {args.output_dir}/*.{args.format}"


OPERATIONS: dict[str, Operation] = {
    op.name: op
    for op in (
        Operation(
            name="get_video_info",
            parse=GetInfoArgs.from_arguments,
            build=builders.build_get_info,
            prepare=None,
            summary=None,
        ),
        Operation(
            name="convert_video",
            parse=ConvertArgs.from_arguments,
            build=builders.build_convert,
            prepare=_parent_of("output_path"),
            summary=_summary("Video conversion completed", "input_path", "output_path"),
        ),
        Operation(
            name="extract_audio",
            parse=ExtractAudioArgs.from_arguments,
            build=builders.build_extract_audio,
            prepare=_parent_of("output_path"),
            summary=_summary("Audio extraction completed", "input_path", "output_path"),
        ),
        Operation(
            name="create_video_from_images",
            parse=CreateFromImagesArgs.from_arguments,
            build=builders.build_create_from_images,
            prepare=_parent_of("output_path"),
            summary=_summary("Video creation completed", "input_pattern", "output_path"),
        ),
        Operation(
            name="trim_video",
            parse=TrimVideoArgs.from_arguments,
            build=builders.build_trim_video,
            prepare=_parent_of("output_path"),
            summary=_summary("Video trimming completed", "input_path", "output_path"),
        ),
        Operation(
            name="add_watermark",
            parse=AddWatermarkArgs.from_arguments,
            build=builders.build_add_watermark,
            prepare=_parent_of("output_path"),
            summary=_summary("Watermark added", "input_path", "output_path"),
        ),
        Operation(
            name="trim_audio",
            parse=TrimAudioArgs.from_arguments,
            build=builders.build_trim_audio,
            prepare=_parent_of("output_path"),
            summary=_summary("Audio trimming completed", "input_path", "output_path"),
        ),
        Operation(
            name="extract_frames",
            parse=ExtractFramesArgs.from_arguments,
            build=builders.build_extract_frames,
            prepare=lambda args: ensure_directory(args.output_dir),
            summary=_frames_summary,
        ),
    )
}


class Dispatcher:
    """Routes a named operation to its command builder.

    Every failure, from a missing argument to a tool that cannot start, comes
    back as an ``OperationResult`` whose text starts with ``"Error: "``.
    """

    def __init__(self, config: AppConfig | None = None, runner: Runner | None = None) -> None:
        self.config = config or AppConfig()
        self.runner: Runner = runner or ToolRunner(self.config.tools)

    @property
    def operation_names(self) -> tuple[str, ...]:
        return tuple(OPERATIONS)

    def dispatch(self, name: str, arguments: Mapping[str, Any] | None = None) -> OperationResult:
        try:
            return OperationResult(self._run(name, arguments or {}))
        except MediaOperationError as exc:
            logger.warning("%s failed: %s", name, exc)
            return OperationResult(f"Error: {exc}")
        except Exception as exc:
            logger.exception("unexpected error in %s", name)
            return OperationResult(f"Error: {exc}")

    def _run(self, name: str, arguments: Mapping[str, Any]) -> str:
        operation = OPERATIONS.get(name)
        if operation is None:
            raise UnknownOperation(name)

        args = operation.parse(arguments, self.config.defaults)
        if operation.prepare is not None:
            operation.prepare(args)
        invocation = operation.build(args, self.config.tools)
        output = self.runner(invocation)

        if operation.summary is None:
            return output
        return f"{operation.summary(args)}\n\n{output}"


def dispatch(name: str, arguments: Mapping[str, Any] | None = None) -> OperationResult:
    return Dispatcher().dispatch(name, arguments)
