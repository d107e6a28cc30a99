"""Registry login and image build/tag/push through the docker CLI.

All commands run against a job-private `DOCKER_CONFIG` directory so the login
token lands in a directory the publisher deletes at the end of the run rather
than in the runner user's `~/.docker/config.json`. The runner's plugins, contexts
and non-credential settings are carried over before login.
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path

from relpub.core.result import Err, Ok, Result
from relpub.core.structured import StrDict, as_obj_list, as_str_dict, get_str, get_str_list
from relpub.output.console import ConsoleProtocol, Style
from relpub.platform.process import run as run_process
from relpub.platform.process import run_streaming
from relpub.services.publish.config import (
    DOCKER_INSPECT_TIMEOUT_SECONDS,
    DOCKER_LOGIN_TIMEOUT_SECONDS,
)
from relpub.services.publish.errors import AuthenticationError, BuildError, PublishError, TagError
from relpub.services.publish.model import (
    Credential,
    ImageRef,
    PublishReceipt,
    Session,
    WorkingTree,
    registry_of,
    split_reference,
)


# Runner state the docker CLI needs for `build`: plugins (buildx), contexts and builders.
_SHARED_CONFIG_ENTRIES = ("cli-plugins", "contexts", "buildx")
# config.json keys that hold or route credentials.
_CREDENTIAL_KEYS = frozenset({"auths", "credsStore", "credHelpers"})


def user_docker_config(environ: Mapping[str, str] | None = None) -> Path:
    """The docker client config directory the runner uses on its own."""
    env = os.environ if environ is None else environ
    configured = env.get("DOCKER_CONFIG")
    return Path(configured) if configured else Path.home() / ".docker"


def seed_docker_config(docker_config: Path, *, source: Path) -> Result[None, str]:
    """Make the runner's docker setup visible from the job's config directory.

    Plugin, context and builder directories are linked. `config.json` is copied
    without its credential keys, so a login stays in `docker_config`.
    """
    if not source.is_dir() or source.resolve() == docker_config.resolve():
        return Ok(None)

    try:
        docker_config.mkdir(parents=True, exist_ok=True)
        for name in _SHARED_CONFIG_ENTRIES:
            entry = source / name
            link = docker_config / name
            if entry.is_dir() and not link.exists():
                link.symlink_to(entry.resolve(), target_is_directory=True)

        config_file = source / "config.json"
        if config_file.is_file():
            payload = as_str_dict(json.loads(config_file.read_text(encoding="utf-8")))
            if payload is not None:
                settings = {k: v for k, v in payload.items() if k not in _CREDENTIAL_KEYS}
                (docker_config / "config.json").write_text(json.dumps(settings, indent=2), encoding="utf-8")
    except (OSError, json.JSONDecodeError) as e:
        return Err(f"cannot prepare docker config from {source}: {e}")

    return Ok(None)


def docker_env(
    docker_config: Path,
    *,
    base: Mapping[str, str] | None = None,
) -> dict[str, str]:
    env = dict(os.environ if base is None else base)
    env["DOCKER_CONFIG"] = str(docker_config)
    return env


def inspect_image(reference: str, *, cwd: Path, env: Mapping[str, str]) -> Result[StrDict, str]:
    """Return the `docker image inspect` object for a local image."""
    result = run_process(
        ["docker", "image", "inspect", reference],
        cwd=cwd,
        env=env,
        timeout=DOCKER_INSPECT_TIMEOUT_SECONDS,
    )
    if isinstance(result, Err):
        return Err(result.error.excerpt() or f"image not found: {reference}")

    try:
        payload: object = json.loads(result.value)
    except json.JSONDecodeError as e:
        return Err(f"invalid JSON from docker image inspect: {e}")

    items = as_obj_list(payload)
    first = as_str_dict(items[0]) if items else None
    if first is None:
        return Err(f"unexpected docker image inspect payload for {reference}")
    return Ok(first)


def authenticate(
    *,
    registry_host: str,
    owner: str,
    credential: Credential,
    docker_config: Path,
    cwd: Path,
    console: ConsoleProtocol,
    user_config: Path | None = None,
) -> Result[Session, AuthenticationError]:
    if not credential:
        return Err(
            AuthenticationError(
                registry_host=registry_host,
                message="registry credential is empty",
            )
        )

    seeded = seed_docker_config(docker_config, source=user_config or user_docker_config())
    if isinstance(seeded, Err):
        return Err(
            AuthenticationError(
                registry_host=registry_host,
                message="cannot prepare the docker client config",
                hint=seeded.error,
            )
        )

    cmd = ["docker", "login", registry_host, "--username", owner, "--password-stdin"]
    console.print(" ".join(cmd), Style.DIM)
    result = run_process(
        cmd,
        cwd=cwd,
        env=docker_env(docker_config),
        input=credential.secret,
        timeout=DOCKER_LOGIN_TIMEOUT_SECONDS,
    )
    if isinstance(result, Err):
        return Err(
            AuthenticationError(
                registry_host=registry_host,
                message=f"login to {registry_host} as {owner} was rejected",
                hint=result.error.excerpt() or "check that the token is valid and not expired",
            )
        )

    return Ok(Session(registry_host=registry_host, username=owner, docker_config=docker_config))


def build_image(
    *,
    working_tree: WorkingTree,
    build_definition: str,
    image_repo_path: str,
    env: Mapping[str, str],
    console: ConsoleProtocol,
) -> Result[ImageRef, BuildError]:
    definition = working_tree.path / build_definition
    if not definition.is_file():
        return Err(
            BuildError(
                message=f"build definition not found: {definition}",
                hint="set RELPUB_BUILD_FILE to the Dockerfile path",
            )
        )

    cmd = [
        "docker",
        "build",
        "--progress=plain",
        "-f",
        str(definition),
        "-t",
        image_repo_path,
        str(working_tree.path),
    ]
    console.print(" ".join(cmd), Style.DIM)
    built = run_streaming(cmd, cwd=working_tree.path, env={**env, "DOCKER_BUILDKIT": "1"})
    if isinstance(built, Err):
        return Err(
            BuildError(
                message=f"docker build failed (exit {built.error.returncode})",
                returncode=built.error.returncode,
                hint="see the build output above",
            )
        )

    inspected = inspect_image(image_repo_path, cwd=working_tree.path, env=env)
    if isinstance(inspected, Err):
        return Err(BuildError(message=f"built image is not present: {image_repo_path}", hint=inspected.error))
    image_id = get_str(inspected.value, "Id")
    if image_id is None:
        return Err(BuildError(message=f"no image id reported for {image_repo_path}"))

    return Ok(ImageRef(reference=image_repo_path, image_id=image_id))


def tag_image(
    *,
    image: ImageRef,
    new_tag: str,
    cwd: Path,
    env: Mapping[str, str],
    console: ConsoleProtocol,
) -> Result[ImageRef, TagError]:
    if not image.reference:
        return Err(TagError(message="no source image to tag"))

    source = inspect_image(image.reference, cwd=cwd, env=env)
    if isinstance(source, Err):
        return Err(TagError(message=f"source image not found: {image.reference}", hint=source.error))

    cmd = ["docker", "tag", image.reference, new_tag]
    console.print(" ".join(cmd), Style.DIM)
    tagged = run_process(cmd, cwd=cwd, env=env, timeout=DOCKER_INSPECT_TIMEOUT_SECONDS)
    if isinstance(tagged, Err):
        return Err(TagError(message=f"failed to tag {image.reference} as {new_tag}", hint=tagged.error.excerpt()))

    return Ok(ImageRef(reference=new_tag, image_id=image.image_id))


def _repo_digest(inspected: StrDict, reference: str) -> str | None:
    repository, _ = split_reference(reference)
    for entry in get_str_list(inspected, "RepoDigests"):
        name, sep, digest = entry.partition("@")
        if sep and name == repository:
            return digest
    return None


def push_image(
    *,
    image: ImageRef,
    session: Session,
    cwd: Path,
    console: ConsoleProtocol,
) -> Result[PublishReceipt, PublishError]:
    target = registry_of(image.reference)
    if target != session.registry_host:
        return Err(
            PublishError(
                message=f"no registry session for {target}",
                hint=f"authenticated against {session.registry_host}",
            )
        )

    env = docker_env(session.docker_config)
    cmd = ["docker", "push", image.reference]
    console.print(" ".join(cmd), Style.DIM)
    pushed = run_streaming(cmd, cwd=cwd, env=env)
    if isinstance(pushed, Err):
        return Err(
            PublishError(
                message=f"docker push failed (exit {pushed.error.returncode})",
                hint="network failure or registry rejection; see the push output above",
            )
        )

    digest: str | None = None
    inspected = inspect_image(image.reference, cwd=cwd, env=env)
    if isinstance(inspected, Err):
        console.warning(f"pushed, but could not read the digest: {inspected.error}")
    else:
        digest = _repo_digest(inspected.value, image.reference)

    return Ok(PublishReceipt(reference=image.reference, digest=digest))
