"""Materialize the full repository history for the build.

The CI host may already have placed a (usually shallow) checkout in the
workspace; in that case the history is completed in place. Otherwise the
repository is cloned at the triggering ref.
"""

from __future__ import annotations

from pathlib import Path

from relpub.core.result import Err, Ok, Result
from relpub.output.console import ConsoleProtocol, Style
from relpub.platform.process import ProcessError
from relpub.platform.process import run as run_process
from relpub.platform.process import run_streaming
from relpub.services.publish.config import GIT_TIMEOUT_SECONDS
from relpub.services.publish.errors import SourceUnavailable
from relpub.services.publish.model import WorkingTree


def _unavailable(message: str, error: ProcessError) -> Err[SourceUnavailable]:
    return Err(SourceUnavailable(message=message, hint=error.excerpt() or str(error)))


def is_git_work_tree(path: Path) -> bool:
    return (path / ".git").exists()


def _fetch_full_history(*, workspace: Path, console: ConsoleProtocol) -> Result[None, SourceUnavailable]:
    shallow = run_process(
        ["git", "rev-parse", "--is-shallow-repository"],
        cwd=workspace,
        timeout=GIT_TIMEOUT_SECONDS,
    )
    if isinstance(shallow, Err):
        return _unavailable(f"not a usable git work tree: {workspace}", shallow.error)

    cmd = ["git", "fetch", "--prune", "--tags", "origin"]
    if shallow.value.strip() == "true":
        cmd.insert(2, "--unshallow")

    console.print(" ".join(cmd), Style.DIM)
    fetched = run_streaming(cmd, cwd=workspace)
    if isinstance(fetched, Err):
        return _unavailable("failed to fetch full repository history", fetched.error)
    return Ok(None)


def _clone(
    *,
    workspace: Path,
    clone_url: str,
    ref_name: str,
    console: ConsoleProtocol,
) -> Result[None, SourceUnavailable]:
    try:
        workspace.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        return Err(SourceUnavailable(message=f"cannot create {workspace.parent}", hint=str(e)))

    # No --depth: the build may need tags and history (e.g. version from git describe).
    cmd = ["git", "clone", "--branch", ref_name, clone_url, str(workspace)]
    console.print(" ".join(cmd), Style.DIM)
    cloned = run_streaming(cmd, cwd=workspace.parent)
    if isinstance(cloned, Err):
        return _unavailable(f"failed to clone {clone_url}@{ref_name}", cloned.error)
    return Ok(None)


def checkout(
    *,
    workspace: Path,
    clone_url: str,
    ref_name: str,
    console: ConsoleProtocol,
) -> Result[WorkingTree, SourceUnavailable]:
    """Return a working tree with complete history at `workspace`."""
    if is_git_work_tree(workspace):
        result = _fetch_full_history(workspace=workspace, console=console)
    else:
        result = _clone(workspace=workspace, clone_url=clone_url, ref_name=ref_name, console=console)
    if isinstance(result, Err):
        return result

    head = run_process(["git", "rev-parse", "HEAD"], cwd=workspace, timeout=GIT_TIMEOUT_SECONDS)
    if isinstance(head, Err):
        return _unavailable(f"cannot resolve HEAD in {workspace}", head.error)

    return Ok(WorkingTree(path=workspace, head_sha=head.value.strip()))
