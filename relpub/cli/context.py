from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from relpub.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    environ: Mapping[str, str]
    cwd: Path
    console: ConsoleProtocol


def build_context() -> CLIContext:
    return CLIContext(
        environ=dict(os.environ),
        cwd=Path.cwd(),
        console=RichConsole(),
    )
