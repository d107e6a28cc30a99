from __future__ import annotations

from relpub.cli.commands._helpers import exit_with_error
from relpub.cli.context import build_context
from relpub.core.result import Err
from relpub.output.console import Style
from relpub.services.publish.job import load_job


def plan() -> None:
    """Show what `publish` would build and push, without side effects."""
    ctx = build_context()

    loaded = load_job(ctx.environ, cwd=ctx.cwd, require_credential=False)
    if isinstance(loaded, Err):
        exit_with_error(loaded.error, ctx)

    job = loaded.value.job
    settings = loaded.value.settings
    ctx.console.header(f"{job.slug}@{job.ref_name}")
    ctx.console.print(f"workspace: {settings.workspace}", Style.DIM)
    ctx.console.print(f"build definition: {settings.build_file}")
    ctx.console.print(f"image: {job.image_repo_path}")
    ctx.console.print(f"published as: {settings.published_tag(job)}")
    ctx.console.print(f"registry login: {job.registry_host} as {job.repository_owner}")
    if job.credential is None:
        ctx.console.warning("no registry credential in the environment; publish would fail")
