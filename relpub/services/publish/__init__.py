"""Publish a container image built from the repository to a registry."""

from relpub.services.publish.errors import (
    AuthenticationError,
    BuildError,
    JobConfigError,
    PublishError,
    PublishFailure,
    SetupError,
    SourceUnavailable,
    TagError,
    ToolMissing,
)
from relpub.services.publish.job import JobInputs, load_job
from relpub.services.publish.model import (
    Credential,
    ImageRef,
    PublishReceipt,
    PublishSettings,
    PublishStage,
    ReleaseJob,
    Session,
    WorkingTree,
    image_repo_path,
    published_tag,
)
from relpub.services.publish.publisher import ReleasePublisher

__all__ = [
    # errors
    "AuthenticationError",
    "BuildError",
    "JobConfigError",
    "PublishError",
    "PublishFailure",
    "SetupError",
    "SourceUnavailable",
    "TagError",
    "ToolMissing",
    # job
    "JobInputs",
    "load_job",
    # model
    "Credential",
    "ImageRef",
    "PublishReceipt",
    "PublishSettings",
    "PublishStage",
    "ReleaseJob",
    "Session",
    "WorkingTree",
    "image_repo_path",
    "published_tag",
    # publisher
    "ReleasePublisher",
]
