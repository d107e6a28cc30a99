"""Failure kinds of a publish run.

One dataclass per kind; the union types are what step functions return in
their `Err`. Every kind carries a human message and an optional hint (usually
the tail of the failing command's stderr).
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class JobConfigError:
    message: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class ToolMissing:
    tool: str
    hint: str

    @property
    def message(self) -> str:
        return f"{self.tool}: missing"


@dataclass(frozen=True, slots=True)
class SourceUnavailable:
    message: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class AuthenticationError:
    registry_host: str
    message: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class BuildError:
    message: str
    returncode: int | None = None
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class TagError:
    message: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class PublishError:
    message: str
    hint: str | None = None


SetupError = JobConfigError | ToolMissing

PublishFailure = SourceUnavailable | AuthenticationError | BuildError | TagError | PublishError
