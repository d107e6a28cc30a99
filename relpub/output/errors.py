"""Error presentation utilities.

Centralized error formatting and exit code mapping, so every failure names the
step it stopped in and exits with a stable code.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from relpub.core.errors import ErrorCode
from relpub.output.console import Style
from relpub.services.publish.errors import (
    AuthenticationError,
    BuildError,
    JobConfigError,
    PublishError,
    PublishFailure,
    SetupError,
    SourceUnavailable,
    TagError,
    ToolMissing,
)

if TYPE_CHECKING:
    from relpub.output.console import ConsoleProtocol

__all__ = ["failed_step", "print_publish_error", "publish_error_exit_code"]


def failed_step(error: PublishFailure | SetupError) -> str:
    match error:
        case JobConfigError() | ToolMissing():
            return "setup"
        case SourceUnavailable():
            return "checkout"
        case AuthenticationError():
            return "login"
        case BuildError():
            return "build"
        case TagError():
            return "tag"
        case PublishError():
            return "push"


def print_publish_error(error: PublishFailure | SetupError, console: ConsoleProtocol) -> None:
    """Print `<step> failed (<Kind>): <message>` plus the hint, if any."""
    kind = type(error).__name__
    console.error(f"{failed_step(error)} failed ({kind}): {error.message}")
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)


def publish_error_exit_code(error: PublishFailure | SetupError) -> int:
    match error:
        case JobConfigError() | ToolMissing():
            return int(ErrorCode.ENV_ERROR)
        case AuthenticationError():
            return int(ErrorCode.AUTH_ERROR)
        case BuildError() | TagError():
            return int(ErrorCode.BUILD_ERROR)
        case SourceUnavailable() | PublishError():
            return int(ErrorCode.NETWORK_ERROR)
