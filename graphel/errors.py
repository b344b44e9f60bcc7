from __future__ import annotations

from dataclasses import dataclass


class GraphelError(Exception):
    pass


class ViewParameterError(GraphelError, ValueError):
    pass


class ExpressionSyntaxError(GraphelError, ValueError):
    def __init__(self, message: str, position: int) -> None:
        super().__init__(f"{message} (at {position})")
        self.message = message
        self.position = position


@dataclass(frozen=True)
class CompilationError:
    """Result returned in place of a compiled function when parsing fails."""

    text: str
    message: str
    position: int = 0

    def __str__(self) -> str:
        return f"cannot compile {self.text!r}: {self.message} (at {self.position})"
