from __future__ import annotations

# Registry / naming defaults
DEFAULT_REGISTRY = "ghcr.io"
DEFAULT_BUILD_FILE = "Dockerfile"
DEFAULT_PUBLISH_TAG = "latest"
DEFAULT_SERVER_URL = "https://github.com"
PUBLISHED_IMAGE_NAME = "image"

# Environment supplied by the CI host
ENV_REPOSITORY = "GITHUB_REPOSITORY"
ENV_REPOSITORY_OWNER = "GITHUB_REPOSITORY_OWNER"
ENV_REF_NAME = "GITHUB_REF_NAME"
ENV_REF = "GITHUB_REF"
ENV_TOKEN = "GITHUB_TOKEN"
ENV_WORKSPACE = "GITHUB_WORKSPACE"
ENV_SERVER_URL = "GITHUB_SERVER_URL"

# relpub settings (all optional)
ENV_REGISTRY = "RELPUB_REGISTRY"
ENV_REGISTRY_TOKEN = "RELPUB_REGISTRY_TOKEN"
ENV_BUILD_FILE = "RELPUB_BUILD_FILE"
ENV_PUBLISH_NAMESPACE = "RELPUB_PUBLISH_NAMESPACE"
ENV_PUBLISH_TAG = "RELPUB_PUBLISH_TAG"

# Metadata queries only; build, push and fetch are left unbounded for the host.
GIT_TIMEOUT_SECONDS = 30.0
DOCKER_INSPECT_TIMEOUT_SECONDS = 30.0
DOCKER_LOGIN_TIMEOUT_SECONDS = 2 * 60.0

REQUIRED_TOOLS: tuple[str, ...] = ("git", "docker")
