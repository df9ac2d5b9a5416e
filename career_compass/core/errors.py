"""Error taxonomy shared by the engine, the stores and the HTTP shell.

- NotFoundError: unknown person, role or roadmap id. Surfaced to the caller.
- InputValidationError: rejected before any computation starts (empty
  requirement list, out-of-range level, empty id list, bad status change).
- UpstreamDegradedError: the narrative generator failed, timed out or
  returned something unusable. Never leaves the roadmap builder; it is
  resolved there with deterministic text.
"""
from __future__ import annotations


class EngineError(Exception):
    """Base class for all engine errors."""

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFoundError(EngineError):
    """A referenced entity does not exist."""


class InputValidationError(EngineError):
    """Input was rejected before computation began."""


class UpstreamDegradedError(EngineError):
    """The narrative generator could not produce usable text."""
