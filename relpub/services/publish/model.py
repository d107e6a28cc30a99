from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path

from relpub.services.publish.config import DEFAULT_PUBLISH_TAG, PUBLISHED_IMAGE_NAME


class PublishStage(Enum):
    START = "start"
    CHECKED_OUT = "checked_out"
    AUTHENTICATED = "authenticated"
    BUILT = "built"
    TAGGED = "tagged"
    PUBLISHED = "published"
    DONE = "done"
    FAILED = "failed"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class Credential:
    """Registry secret. Never shown by repr/str."""

    secret: str = field(repr=False)

    def __bool__(self) -> bool:
        return bool(self.secret)


@dataclass(frozen=True, slots=True)
class ReleaseJob:
    """Inputs of one publish run, as supplied by the CI host."""

    repository_owner: str
    repository_name: str
    # Branch or tag name as git knows it; may contain slashes.
    ref_name: str
    registry_host: str
    # None once consumed by authentication, or when only planning.
    credential: Credential | None = None

    @property
    def slug(self) -> str:
        return f"{self.repository_owner}/{self.repository_name}"

    @property
    def image_repo_path(self) -> str:
        return image_repo_path(
            registry_host=self.registry_host,
            owner=self.repository_owner,
            name=self.repository_name,
            ref_name=self.ref_name,
        )

    def without_credential(self) -> ReleaseJob:
        return replace(self, credential=None)


@dataclass(frozen=True, slots=True)
class PublishSettings:
    workspace: Path
    server_url: str
    build_file: str
    publish_namespace: str
    publish_tag: str = DEFAULT_PUBLISH_TAG

    def clone_url(self, job: ReleaseJob) -> str:
        return f"{self.server_url.rstrip('/')}/{job.slug}.git"

    def published_tag(self, job: ReleaseJob) -> str:
        return published_tag(
            registry_host=job.registry_host,
            namespace=self.publish_namespace,
            tag=self.publish_tag,
        )


@dataclass(frozen=True, slots=True)
class WorkingTree:
    path: Path
    head_sha: str

    @property
    def short_sha(self) -> str:
        return self.head_sha[:8]


@dataclass(frozen=True, slots=True)
class Session:
    """Proof of a successful registry login; holds no secret."""

    registry_host: str
    username: str
    docker_config: Path


@dataclass(frozen=True, slots=True)
class ImageRef:
    reference: str
    image_id: str


@dataclass(frozen=True, slots=True)
class PublishReceipt:
    reference: str
    digest: str | None


def ref_basename(ref: str) -> str:
    """Last path segment of a ref: `release/v1` -> `v1`."""
    return ref.rstrip("/").rsplit("/", 1)[-1]


def image_repo_path(*, registry_host: str, owner: str, name: str, ref_name: str) -> str:
    """`registry/owner/name/<last ref segment>`, lowercased as registries require."""
    return f"{registry_host}/{owner}/{name}/{ref_basename(ref_name)}".lower()


def published_tag(*, registry_host: str, namespace: str, tag: str = DEFAULT_PUBLISH_TAG) -> str:
    """`registry/namespace/image:tag`."""
    repository = f"{registry_host}/{namespace.strip('/')}/{PUBLISHED_IMAGE_NAME}".lower()
    return f"{repository}:{tag}"


def split_reference(reference: str) -> tuple[str, str | None]:
    """Split `repo[:tag]` into repository and tag.

    A colon before the last slash belongs to a registry port, not a tag.
    """
    slash = reference.rfind("/")
    colon = reference.rfind(":")
    if colon > slash:
        return reference[:colon], reference[colon + 1 :]
    return reference, None


def registry_of(reference: str) -> str:
    return reference.split("/", 1)[0]
