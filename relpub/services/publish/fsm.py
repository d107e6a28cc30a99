from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Generic, TypeVar

from relpub.core.result import Err, Ok, Result
from relpub.services.publish.model import PublishStage

S = TypeVar("S")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class StepAdvance(Generic[S]):
    state: S


@dataclass(frozen=True, slots=True)
class StepFinish:
    pass


StepOutcome = StepAdvance[S] | StepFinish
StepHandler = Callable[[S], Result[StepOutcome[S], E]]
GetStage = Callable[[S], PublishStage]
OnTransition = Callable[[PublishStage], None]


FINISH = StepFinish()


def advance(state: S) -> StepAdvance[S]:
    return StepAdvance(state=state)


def run_state_machine(
    *,
    initial_state: S,
    get_stage: GetStage[S],
    handlers: Mapping[PublishStage, StepHandler[S, E]],
    on_transition: OnTransition,
) -> Result[S, E]:
    """Run handlers until one finishes or fails.

    `on_transition` sees every stage entered after the initial one, and
    `PublishStage.FAILED` when a handler returns `Err`. There is no way back
    to an earlier stage: each handler must advance to a later one.
    """
    current = initial_state
    order = list(PublishStage)

    while True:
        stage = get_stage(current)
        handler = handlers.get(stage)
        if handler is None:
            raise ValueError(f"no handler for publish stage: {stage}")

        outcome = handler(current)
        if isinstance(outcome, Err):
            on_transition(PublishStage.FAILED)
            return outcome

        if isinstance(outcome.value, StepFinish):
            return Ok(current)

        nxt = outcome.value.state
        next_stage = get_stage(nxt)
        if order.index(next_stage) <= order.index(stage):
            raise ValueError(f"publish stage cannot move from {stage} to {next_stage}")
        on_transition(next_stage)
        current = nxt
