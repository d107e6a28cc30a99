"""Platform abstraction layer."""

from .process import (
    ProcessError,
    run,
    run_streaming,
)

__all__ = [
    # process
    "ProcessError",
    "run",
    "run_streaming",
]
