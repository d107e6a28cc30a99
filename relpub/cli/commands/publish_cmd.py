from __future__ import annotations

from relpub.cli.commands._helpers import exit_with_error
from relpub.cli.context import build_context
from relpub.core.result import Err
from relpub.services.publish.job import load_job
from relpub.services.publish.model import split_reference
from relpub.services.publish.preflight import ensure_tools_available
from relpub.services.publish.publisher import ReleasePublisher


def publish() -> None:
    """Checkout, log in, build, tag and push the release image."""
    ctx = build_context()

    tools = ensure_tools_available()
    if isinstance(tools, Err):
        exit_with_error(tools.error, ctx)

    loaded = load_job(ctx.environ, cwd=ctx.cwd)
    if isinstance(loaded, Err):
        exit_with_error(loaded.error, ctx)

    publisher = ReleasePublisher(
        job=loaded.value.job,
        settings=loaded.value.settings,
        console=ctx.console,
    )
    # Only the publisher holds the credential from here on.
    del loaded
    result = publisher.run()
    if isinstance(result, Err):
        exit_with_error(result.error, ctx)

    receipt = result.value
    ctx.console.header("published")
    ctx.console.info(receipt.reference)
    if receipt.digest:
        ctx.console.info(f"{split_reference(receipt.reference)[0]}@{receipt.digest}")
