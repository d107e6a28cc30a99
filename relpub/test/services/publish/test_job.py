from __future__ import annotations

from pathlib import Path

from relpub.core.result import Err, Ok
from relpub.services.publish.job import load_job, short_ref
from relpub.services.publish.model import ref_basename, registry_of


def _env(**overrides: str) -> dict[str, str]:
    env = {
        "GITHUB_REPOSITORY": "rob-luke/mne-nirs",
        "GITHUB_REPOSITORY_OWNER": "rob-luke",
        "GITHUB_REF": "refs/heads/main",
        "GITHUB_TOKEN": "ghp_secret",
    }
    env.update(overrides)
    return env


def test_defaults_from_github_environment(tmp_path: Path) -> None:
    result = load_job(_env(), cwd=tmp_path)

    assert isinstance(result, Ok)
    job = result.value.job
    settings = result.value.settings
    assert job.registry_host == "ghcr.io"
    assert job.ref_name == "main"
    assert job.credential is not None and job.credential.secret == "ghp_secret"
    assert settings.workspace == tmp_path
    assert settings.build_file == "Dockerfile"
    assert settings.published_tag(job) == "ghcr.io/rob-luke/mne-nirs/image:latest"
    assert job.image_repo_path == "ghcr.io/rob-luke/mne-nirs/main"


def test_short_ref_strips_only_the_ref_namespace() -> None:
    assert short_ref("refs/heads/main") == "main"
    assert short_ref("refs/heads/release/v1") == "release/v1"
    assert short_ref("refs/tags/v0.5") == "v0.5"
    assert short_ref("release/v1") == "release/v1"


def test_ref_basename_takes_last_segment() -> None:
    assert ref_basename("refs/heads/feature/x") == "x"
    assert ref_basename("main") == "main"


def test_slashed_branch_keeps_full_name_for_checkout(tmp_path: Path) -> None:
    result = load_job(_env(GITHUB_REF_NAME="release/v1"), cwd=tmp_path)

    assert isinstance(result, Ok)
    job = result.value.job
    assert job.ref_name == "release/v1"
    assert job.image_repo_path == "ghcr.io/rob-luke/mne-nirs/v1"


def test_slashed_branch_from_full_ref(tmp_path: Path) -> None:
    result = load_job(_env(GITHUB_REF="refs/heads/release/v1"), cwd=tmp_path)

    assert isinstance(result, Ok)
    assert result.value.job.ref_name == "release/v1"


def test_registry_host_is_lowercased(tmp_path: Path) -> None:
    result = load_job(_env(RELPUB_REGISTRY="GHCR.io"), cwd=tmp_path)

    assert isinstance(result, Ok)
    job = result.value.job
    tag = result.value.settings.published_tag(job)
    assert job.registry_host == "ghcr.io"
    assert registry_of(tag) == job.registry_host


def test_ref_name_variable_wins_over_ref(tmp_path: Path) -> None:
    result = load_job(_env(GITHUB_REF_NAME="release"), cwd=tmp_path)
    assert isinstance(result, Ok)
    assert result.value.job.ref_name == "release"


def test_owner_falls_back_to_repository(tmp_path: Path) -> None:
    env = _env()
    del env["GITHUB_REPOSITORY_OWNER"]
    result = load_job(env, cwd=tmp_path)
    assert isinstance(result, Ok)
    assert result.value.job.repository_owner == "rob-luke"


def test_relpub_settings_override_defaults(tmp_path: Path) -> None:
    env = _env(
        RELPUB_REGISTRY="registry.example.com/",
        RELPUB_BUILD_FILE="docker/Dockerfile.release",
        RELPUB_PUBLISH_NAMESPACE="team/tools",
        RELPUB_PUBLISH_TAG="stable",
        RELPUB_REGISTRY_TOKEN="robot-token",
        GITHUB_WORKSPACE=str(tmp_path / "src"),
    )
    result = load_job(env, cwd=tmp_path)

    assert isinstance(result, Ok)
    job = result.value.job
    settings = result.value.settings
    assert job.registry_host == "registry.example.com"
    assert job.credential is not None and job.credential.secret == "robot-token"
    assert settings.build_file == "docker/Dockerfile.release"
    assert settings.workspace == tmp_path / "src"
    assert settings.published_tag(job) == "registry.example.com/team/tools/image:stable"


def test_missing_repository(tmp_path: Path) -> None:
    env = _env()
    del env["GITHUB_REPOSITORY"]
    result = load_job(env, cwd=tmp_path)
    assert isinstance(result, Err)
    assert "GITHUB_REPOSITORY" in result.error.message


def test_malformed_repository(tmp_path: Path) -> None:
    result = load_job(_env(GITHUB_REPOSITORY="mne-nirs"), cwd=tmp_path)
    assert isinstance(result, Err)
    assert result.error.hint == "expected owner/name"


def test_missing_ref(tmp_path: Path) -> None:
    env = _env()
    del env["GITHUB_REF"]
    result = load_job(env, cwd=tmp_path)
    assert isinstance(result, Err)
    assert "GITHUB_REF" in result.error.message


def test_missing_credential_only_fails_when_required(tmp_path: Path) -> None:
    env = _env()
    del env["GITHUB_TOKEN"]

    required = load_job(env, cwd=tmp_path)
    assert isinstance(required, Err)
    assert "GITHUB_TOKEN" in required.error.message

    optional = load_job(env, cwd=tmp_path, require_credential=False)
    assert isinstance(optional, Ok)
    assert optional.value.job.credential is None


def test_blank_credential_counts_as_missing(tmp_path: Path) -> None:
    result = load_job(_env(GITHUB_TOKEN="   "), cwd=tmp_path)
    assert isinstance(result, Err)
