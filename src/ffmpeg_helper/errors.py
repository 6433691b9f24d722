from __future__ import annotations


class MediaOperationError(RuntimeError):
    pass


class MissingArgument(MediaOperationError):
    pass


class InvalidArgument(MediaOperationError):
    pass


class UnknownOperation(InvalidArgument):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class InputNotFound(MediaOperationError):
    def __init__(self, path: str) -> None:
        super().__init__(f"Input file does not exist: {path}")
        self.path = path


class OutputPrepFailed(MediaOperationError):
    pass


class ToolInvocationFailed(MediaOperationError):
    pass
