from __future__ import annotations

import shutil

from relpub.core.result import Err, Ok, Result
from relpub.services.publish.config import REQUIRED_TOOLS
from relpub.services.publish.errors import ToolMissing

_INSTALL_HINTS = {
    "git": "Install git: https://git-scm.com/downloads",
    "docker": "Install Docker Engine with BuildKit: https://docs.docker.com/engine/install/",
}


def ensure_tools_available(tools: tuple[str, ...] = REQUIRED_TOOLS) -> Result[None, ToolMissing]:
    for tool in tools:
        if shutil.which(tool) is None:
            return Err(ToolMissing(tool=tool, hint=_INSTALL_HINTS.get(tool, f"Install {tool}")))
    return Ok(None)
