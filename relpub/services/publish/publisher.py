"""The release publisher: checkout, login, build, tag, push.

Each step is a handler in a linear state machine. The first failing step ends
the run in `PublishStage.FAILED`; nothing is retried and nothing already done
is undone.
"""

from __future__ import annotations

import tempfile
from dataclasses import dataclass, replace
from pathlib import Path

from relpub.core.result import Err, Ok, Result
from relpub.output.console import ConsoleProtocol, Style
from relpub.services.publish.docker import authenticate, build_image, docker_env, push_image, tag_image
from relpub.services.publish.errors import (
    AuthenticationError,
    BuildError,
    PublishError,
    PublishFailure,
    SourceUnavailable,
    TagError,
)
from relpub.services.publish.fsm import FINISH, StepHandler, StepOutcome, advance, run_state_machine
from relpub.services.publish.model import (
    ImageRef,
    PublishReceipt,
    PublishSettings,
    PublishStage,
    ReleaseJob,
    Session,
    WorkingTree,
)
from relpub.services.publish.source import checkout

_TOTAL_STEPS = 5


@dataclass(frozen=True, slots=True)
class PublishRun:
    stage: PublishStage
    tree: WorkingTree | None = None
    session: Session | None = None
    built: ImageRef | None = None
    tagged: ImageRef | None = None
    receipt: PublishReceipt | None = None


class ReleasePublisher:
    """Runs the publish sequence once for one job."""

    def __init__(
        self,
        *,
        job: ReleaseJob,
        settings: PublishSettings,
        console: ConsoleProtocol,
    ) -> None:
        self._job = job
        self._settings = settings
        self._console = console
        self._stages: list[PublishStage] = []
        self._docker_config: Path | None = None

    @property
    def stages(self) -> tuple[PublishStage, ...]:
        """Stages entered so far, in order, excluding START."""
        return tuple(self._stages)

    @property
    def image_repo_path(self) -> str:
        return self._job.image_repo_path

    @property
    def published_tag(self) -> str:
        return self._settings.published_tag(self._job)

    # Steps

    def checkout(self) -> Result[WorkingTree, SourceUnavailable]:
        return checkout(
            workspace=self._settings.workspace,
            clone_url=self._settings.clone_url(self._job),
            ref_name=self._job.ref_name,
            console=self._console,
        )

    def authenticate(self, tree: WorkingTree) -> Result[Session, AuthenticationError]:
        credential = self._job.credential
        # Used once: drop our reference whatever the outcome.
        self._job = self._job.without_credential()
        if credential is None:
            return Err(
                AuthenticationError(
                    registry_host=self._job.registry_host,
                    message="no registry credential supplied",
                )
            )
        return authenticate(
            registry_host=self._job.registry_host,
            owner=self._job.repository_owner,
            credential=credential,
            docker_config=self._require_docker_config(),
            cwd=tree.path,
            console=self._console,
        )

    def build_image(self, tree: WorkingTree, session: Session) -> Result[ImageRef, BuildError]:
        return build_image(
            working_tree=tree,
            build_definition=self._settings.build_file,
            image_repo_path=self.image_repo_path,
            env=docker_env(session.docker_config),
            console=self._console,
        )

    def tag_image(self, image: ImageRef, tree: WorkingTree, session: Session) -> Result[ImageRef, TagError]:
        return tag_image(
            image=image,
            new_tag=self.published_tag,
            cwd=tree.path,
            env=docker_env(session.docker_config),
            console=self._console,
        )

    def push_image(
        self, image: ImageRef, tree: WorkingTree, session: Session
    ) -> Result[PublishReceipt, PublishError]:
        return push_image(image=image, session=session, cwd=tree.path, console=self._console)

    # Sequence

    def run(self) -> Result[PublishReceipt, PublishFailure]:
        """Run all steps; a publisher instance runs at most once."""
        if self._stages:
            raise RuntimeError("publisher already ran")

        with tempfile.TemporaryDirectory(prefix="relpub-docker-") as docker_config:
            self._docker_config = Path(docker_config)
            try:
                result = run_state_machine(
                    initial_state=PublishRun(stage=PublishStage.START),
                    get_stage=lambda r: r.stage,
                    handlers=self._handlers(),
                    on_transition=self._stages.append,
                )
            finally:
                self._docker_config = None

        if isinstance(result, Err):
            return result
        receipt = result.value.receipt
        assert receipt is not None
        return Ok(receipt)

    def _require_docker_config(self) -> Path:
        if self._docker_config is None:
            raise RuntimeError("docker config directory is only available during run()")
        return self._docker_config

    def _handlers(self) -> dict[PublishStage, StepHandler[PublishRun, PublishFailure]]:
        return {
            PublishStage.START: self._on_start,
            PublishStage.CHECKED_OUT: self._on_checked_out,
            PublishStage.AUTHENTICATED: self._on_authenticated,
            PublishStage.BUILT: self._on_built,
            PublishStage.TAGGED: self._on_tagged,
            PublishStage.PUBLISHED: self._on_published,
            PublishStage.DONE: lambda _: Ok(FINISH),
        }

    def _on_start(self, run: PublishRun) -> Result[StepOutcome[PublishRun], PublishFailure]:
        self._console.step(1, _TOTAL_STEPS, f"checkout {self._job.slug}@{self._job.ref_name}")
        tree = self.checkout()
        if isinstance(tree, Err):
            return tree
        self._console.success(f"full history at {tree.value.path} ({tree.value.short_sha})")
        return Ok(advance(replace(run, stage=PublishStage.CHECKED_OUT, tree=tree.value)))

    def _on_checked_out(self, run: PublishRun) -> Result[StepOutcome[PublishRun], PublishFailure]:
        assert run.tree is not None
        self._console.step(2, _TOTAL_STEPS, f"login {self._job.registry_host}")
        session = self.authenticate(run.tree)
        if isinstance(session, Err):
            return session
        self._console.success(f"logged in as {session.value.username}")
        return Ok(advance(replace(run, stage=PublishStage.AUTHENTICATED, session=session.value)))

    def _on_authenticated(self, run: PublishRun) -> Result[StepOutcome[PublishRun], PublishFailure]:
        assert run.tree is not None and run.session is not None
        self._console.step(3, _TOTAL_STEPS, f"build {self.image_repo_path}")
        built = self.build_image(run.tree, run.session)
        if isinstance(built, Err):
            return built
        self._console.success(f"built {built.value.image_id}")
        return Ok(advance(replace(run, stage=PublishStage.BUILT, built=built.value)))

    def _on_built(self, run: PublishRun) -> Result[StepOutcome[PublishRun], PublishFailure]:
        assert run.tree is not None and run.session is not None and run.built is not None
        self._console.step(4, _TOTAL_STEPS, f"tag {self.published_tag}")
        tagged = self.tag_image(run.built, run.tree, run.session)
        if isinstance(tagged, Err):
            return tagged
        self._console.success(f"tagged {tagged.value.reference}")
        return Ok(advance(replace(run, stage=PublishStage.TAGGED, tagged=tagged.value)))

    def _on_tagged(self, run: PublishRun) -> Result[StepOutcome[PublishRun], PublishFailure]:
        assert run.tree is not None and run.session is not None and run.tagged is not None
        self._console.step(5, _TOTAL_STEPS, f"push {run.tagged.reference}")
        receipt = self.push_image(run.tagged, run.tree, run.session)
        if isinstance(receipt, Err):
            return receipt
        self._console.success(f"pushed {receipt.value.reference}")
        return Ok(advance(replace(run, stage=PublishStage.PUBLISHED, receipt=receipt.value)))

    def _on_published(self, run: PublishRun) -> Result[StepOutcome[PublishRun], PublishFailure]:
        if run.receipt is not None and run.receipt.digest:
            self._console.print(f"digest: {run.receipt.digest}", Style.DIM)
        return Ok(advance(replace(run, stage=PublishStage.DONE)))
