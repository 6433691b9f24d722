from .args import (
    AddWatermarkArgs,
    ConvertArgs,
    CreateFromImagesArgs,
    ExtractAudioArgs,
    ExtractFramesArgs,
    GetInfoArgs,
    TrimAudioArgs,
    TrimVideoArgs,
)
from .catalog import TOOL_DEFINITIONS, tool_names

__all__ = [
    "AddWatermarkArgs",
    "ConvertArgs",
    "CreateFromImagesArgs",
    "ExtractAudioArgs",
    "ExtractFramesArgs",
    "GetInfoArgs",
    "TrimAudioArgs",
    "TrimVideoArgs",
    "TOOL_DEFINITIONS",
    "tool_names",
]
