"""Build the release job from the environment the CI host provides.

There is no configuration file: repository coordinates and the credential come
from the trigger (GitHub Actions variables), and the few deployment settings
come from optional `RELPUB_*` variables.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from relpub.core.result import Err, Ok, Result
from relpub.core.structured import get_str
from relpub.services.publish import config
from relpub.services.publish.errors import JobConfigError
from relpub.services.publish.model import Credential, PublishSettings, ReleaseJob


@dataclass(frozen=True, slots=True)
class JobInputs:
    job: ReleaseJob
    settings: PublishSettings


_REF_PREFIXES = ("refs/heads/", "refs/tags/")


def short_ref(ref: str) -> str:
    """Branch or tag name of a ref: `refs/heads/release/v1` -> `release/v1`."""
    ref = ref.strip().rstrip("/")
    for prefix in _REF_PREFIXES:
        if ref.startswith(prefix):
            return ref[len(prefix) :]
    return ref


def _missing(name: str, hint: str | None = None) -> Err[JobConfigError]:
    return Err(JobConfigError(message=f"missing required environment variable: {name}", hint=hint))


def _split_repository(value: str) -> tuple[str, str] | None:
    parts = value.split("/")
    if len(parts) != 2 or not all(parts):
        return None
    return parts[0], parts[1]


def load_job(
    environ: Mapping[str, str],
    *,
    cwd: Path,
    require_credential: bool = True,
) -> Result[JobInputs, JobConfigError]:
    """Read job inputs and settings.

    Args:
        environ: Process environment (usually `os.environ`).
        cwd: Fallback working tree when `GITHUB_WORKSPACE` is unset.
        require_credential: False for read-only commands such as `plan`.

    Returns:
        Ok(JobInputs) or Err(JobConfigError) naming the offending variable.
    """
    repository = get_str(environ, config.ENV_REPOSITORY)
    if repository is None:
        return _missing(config.ENV_REPOSITORY, hint="expected owner/name")
    split = _split_repository(repository)
    if split is None:
        return Err(
            JobConfigError(
                message=f"invalid {config.ENV_REPOSITORY}: {repository!r}",
                hint="expected owner/name",
            )
        )
    owner_from_repo, name = split
    owner = get_str(environ, config.ENV_REPOSITORY_OWNER) or owner_from_repo

    ref = get_str(environ, config.ENV_REF_NAME) or get_str(environ, config.ENV_REF)
    if ref is None:
        return _missing(config.ENV_REF, hint=f"or set {config.ENV_REF_NAME}")
    ref_name = short_ref(ref)
    if not ref_name:
        return Err(JobConfigError(message=f"cannot derive a ref name from {ref!r}"))

    credential: Credential | None = None
    secret = get_str(environ, config.ENV_REGISTRY_TOKEN) or get_str(environ, config.ENV_TOKEN)
    if secret is not None:
        credential = Credential(secret)
    elif require_credential:
        return _missing(config.ENV_TOKEN, hint=f"or set {config.ENV_REGISTRY_TOKEN}")

    registry = get_str(environ, config.ENV_REGISTRY) or config.DEFAULT_REGISTRY
    workspace = get_str(environ, config.ENV_WORKSPACE)

    job = ReleaseJob(
        repository_owner=owner,
        repository_name=name,
        ref_name=ref_name,
        registry_host=registry.rstrip("/").lower(),
        credential=credential,
    )
    settings = PublishSettings(
        workspace=Path(workspace) if workspace else cwd,
        server_url=get_str(environ, config.ENV_SERVER_URL) or config.DEFAULT_SERVER_URL,
        build_file=get_str(environ, config.ENV_BUILD_FILE) or config.DEFAULT_BUILD_FILE,
        publish_namespace=get_str(environ, config.ENV_PUBLISH_NAMESPACE) or job.slug,
        publish_tag=get_str(environ, config.ENV_PUBLISH_TAG) or config.DEFAULT_PUBLISH_TAG,
    )
    return Ok(JobInputs(job=job, settings=settings))
