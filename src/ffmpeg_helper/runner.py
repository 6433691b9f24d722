from __future__ import annotations

from dataclasses import dataclass
import logging
import shlex
import subprocess

from ffmpeg_helper.config import ToolConfig
from ffmpeg_helper.errors import ToolInvocationFailed


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Invocation:
    executable: str
    args: tuple[str, ...]

    @property
    def argv(self) -> list[str]:
        return [self.executable, *self.args]

    def echo(self) -> str:
        return shlex.join(self.argv)


@dataclass(frozen=True)
class ToolOutput:
    returncode: int
    stdout: str
    stderr: str


def _label(invocation: Invocation) -> str:
    name = invocation.executable.replace("\\", "/").rsplit("/", 1)[-1].lower()
    return "FFprobe" if name.startswith("ffprobe") else "FFmpeg"


def _execute(invocation: Invocation) -> ToolOutput:
    label = _label(invocation)
    try:
        proc = subprocess.run(
            invocation.argv,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            errors="replace",
        )
    except OSError as exc:
        raise ToolInvocationFailed(f"{label} error: {exc}") from exc
    return ToolOutput(returncode=proc.returncode, stdout=proc.stdout or "", stderr=proc.stderr or "")


class ToolRunner:
    """Runs one invocation to completion and reduces it to result text.

    A zero exit yields stdout, or stderr when stdout is empty (ffmpeg reports
    on stderr). A nonzero exit that left diagnostics on stderr yields those
    diagnostics unless ``fail_on_tool_error`` is set.
    """

    def __init__(self, tools: ToolConfig | None = None) -> None:
        self.tools = tools or ToolConfig()

    def __call__(self, invocation: Invocation) -> str:
        return self.run(invocation)

    def run(self, invocation: Invocation) -> str:
        label = _label(invocation)
        logger.info("Running %s command: %s", label, invocation.echo())
        out = _execute(invocation)

        if out.returncode == 0:
            return out.stdout or out.stderr

        logger.warning("%s exited with status %s", label, out.returncode)
        diagnostics = out.stderr.strip()
        if diagnostics and not self.tools.fail_on_tool_error:
            return out.stderr
        if diagnostics:
            raise ToolInvocationFailed(f"{label} error: {diagnostics}")
        raise ToolInvocationFailed(f"{label} error: command exited with status {out.returncode}")
