"""Result type for explicit error handling.

Every publish step returns either `Ok(value)` or `Err(error)`; failures are
values, so the step runner can stop on the first `Err` without try/except
blocks around each external command.

Usage:
    match build_image(working_tree=tree, build_definition="Dockerfile", ...):
        case Ok(image):
            print(f"built {image.reference}")
        case Err(error):
            print(f"build failed: {error.message}")
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """A successful result.

    Attributes:
        value: The success value.
    """

    value: T

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """A failed result.

    Attributes:
        error: The error value.
    """

    error: E

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result = Ok[T] | Err[E]
