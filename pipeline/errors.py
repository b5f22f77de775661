"""pipeline.errors

Failure vocabulary of the prediction pipeline and the single-slot error
channel the presentation layer reads.

* :class:`PipelineFailure` is raised *inside* a run by whichever phase failed
  and is caught by the pipeline itself; callers see it as an
  :class:`ErrorNotice` on the channel.
* :class:`PipelineBusyError` is the only exception a caller of
  ``PredictionPipeline.run`` has to handle.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class FailureReason(str, Enum):
    TRANSPORT = "transport"
    TIMEOUT = "timeout"
    PROTOCOL = "protocol"
    CANCELLED = "cancelled"


class PipelineFailure(RuntimeError):
    def __init__(self, message: str, *, reason: FailureReason, phase: Optional[str] = None) -> None:
        super().__init__(message)
        self.reason = reason
        self.phase = phase


class PipelineBusyError(RuntimeError):
    """A run was requested while another run is in flight."""


@dataclass(frozen=True)
class ErrorNotice:
    message: str
    reason: FailureReason
    phase: Optional[str] = None

    @classmethod
    def from_failure(cls, failure: PipelineFailure) -> "ErrorNotice":
        return cls(message=str(failure), reason=failure.reason, phase=failure.phase)


class ErrorChannel:
    """Holds the latest failure notice; a newer report replaces the older one."""

    def __init__(self) -> None:
        self._current: Optional[ErrorNotice] = None

    @property
    def current(self) -> Optional[ErrorNotice]:
        return self._current

    def report(self, notice: ErrorNotice) -> None:
        self._current = notice

    def dismiss(self) -> None:
        self._current = None


def reason_for_kind(kind: str) -> FailureReason:
    """Map a client error kind ("http", "timeout", ...) to a failure reason."""
    if kind == "timeout":
        return FailureReason.TIMEOUT
    if kind == "decode":
        return FailureReason.PROTOCOL
    return FailureReason.TRANSPORT
