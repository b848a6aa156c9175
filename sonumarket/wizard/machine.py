"""Guided multi-step flows.

One engine drives every guided flow (laptop configurator, CV purchase,
redaction request, service booking). A flow is a table of steps, each with a
validator for the values it accepts and a gate that must hold before the user
may move past it. Invalid actions are no-ops: the caller is expected to check
``can_advance()`` / ``is_selection_valid()`` and grey out the button.

    in_progress --advance() on last step--> submitting --success--> complete
                                                 |
                                                 +--failure--> in_progress (same step)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Tuple, Union

logger = logging.getLogger(__name__)

Selections = Mapping[str, Any]
Gate = Callable[[Selections], bool]
Validator = Callable[[Any], bool]


class WizardStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    SUBMITTING = "submitting"
    COMPLETE = "complete"


class Retreat(str, Enum):
    RETREATED = "retreated"
    EXIT_FLOW = "exit_flow"  # already on the first step, caller closes the flow
    REJECTED = "rejected"


@dataclass(frozen=True)
class SubmitSuccess:
    reference: Optional[str] = None


@dataclass(frozen=True)
class SubmitFailure:
    reason: str = "pending"


SubmitResult = Union[SubmitSuccess, SubmitFailure]


@dataclass(frozen=True)
class SubmitRequest:
    flow: str
    selections: Dict[str, Any]
    amount: int


Submit = Callable[[SubmitRequest], Awaitable[SubmitResult]]


def has_selection(step: str) -> Gate:
    def gate(selections: Selections) -> bool:
        return selections.get(step) is not None

    return gate


def all_selected(selections: Selections) -> bool:
    return all(v is not None for v in selections.values())


def always(_: Selections) -> bool:
    return True


@dataclass(frozen=True)
class StepRule:
    step: str
    validator: Validator
    gate: Gate
    clearable: bool = False  # selection may be dropped again, e.g. an attachment


@dataclass(frozen=True)
class FlowDefinition:
    name: str
    rules: Tuple[StepRule, ...]
    auto_advance: bool = False
    amount: Callable[[Selections], int] = lambda _: 0

    @property
    def steps(self) -> Tuple[str, ...]:
        return tuple(r.step for r in self.rules)

    def rule(self, step: str) -> Optional[StepRule]:
        return next((r for r in self.rules if r.step == step), None)


class FlowBuilder:
    """
    FlowBuilder("cv_purchase")
        .step("template", validator=is_template)
        .step("photo", validator=is_attachment, gate=always, clearable=True)
        .build()

    The default gate of a step is "the step has a selection".
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._rules: List[StepRule] = []
        self._auto_advance = False
        self._amount: Callable[[Selections], int] = lambda _: 0

    def step(
        self,
        step: str,
        *,
        validator: Validator,
        gate: Optional[Gate] = None,
        clearable: bool = False,
    ) -> "FlowBuilder":
        if any(r.step == step for r in self._rules):
            raise ValueError(f"duplicate step {step!r} in flow {self._name!r}")
        self._rules.append(StepRule(step, validator, gate or has_selection(step), clearable))
        return self

    def auto_advance(self, enabled: bool = True) -> "FlowBuilder":
        self._auto_advance = enabled
        return self

    def amount(self, fn: Callable[[Selections], int]) -> "FlowBuilder":
        self._amount = fn
        return self

    def build(self) -> FlowDefinition:
        if not self._rules:
            raise ValueError(f"flow {self._name!r} has no steps")
        return FlowDefinition(self._name, tuple(self._rules), self._auto_advance, self._amount)


@dataclass
class WizardState:
    steps: Tuple[str, ...]
    current_index: int = 0
    selections: Dict[str, Any] = field(default_factory=dict)
    status: WizardStatus = WizardStatus.IN_PROGRESS
    last_outcome: Optional[SubmitResult] = None

    @classmethod
    def initial(cls, steps: Tuple[str, ...]) -> "WizardState":
        return cls(steps=steps, selections={s: None for s in steps})


class WizardMachine:
    def __init__(self, flow: FlowDefinition, submit: Submit) -> None:
        self.flow = flow
        self._submit = submit
        self.state = WizardState.initial(flow.steps)

    # ---------------- read ----------------

    @property
    def steps(self) -> Tuple[str, ...]:
        return self.state.steps

    @property
    def current_index(self) -> int:
        return self.state.current_index

    @property
    def current_step(self) -> str:
        return self.state.steps[self.state.current_index]

    @property
    def status(self) -> WizardStatus:
        return self.state.status

    @property
    def selections(self) -> Mapping[str, Any]:
        return MappingProxyType(self.state.selections)

    @property
    def is_last_step(self) -> bool:
        return self.state.current_index == len(self.state.steps) - 1

    @property
    def is_complete(self) -> bool:
        """Every step has a selection."""
        return all_selected(self.state.selections)

    def amount(self) -> int:
        return self.flow.amount(self.state.selections)

    def can_advance(self, step: Optional[str] = None) -> bool:
        rule = self.flow.rule(step or self.current_step)
        return rule is not None and bool(rule.gate(self.state.selections))

    def is_selection_valid(self, step: str, value: Any) -> bool:
        rule = self.flow.rule(step)
        if rule is None or value is None:
            return False
        return bool(rule.validator(value))

    # ---------------- transitions ----------------

    async def advance(self) -> bool:
        """Move to the next step, or submit from the last one.

        Returns False when the action is not allowed in the current state.
        """
        if self.state.status is not WizardStatus.IN_PROGRESS:
            return False
        if not self.can_advance():
            return False

        if not self.is_last_step:
            self.state.current_index += 1
            return True

        self.state.status = WizardStatus.SUBMITTING
        request = SubmitRequest(self.flow.name, dict(self.state.selections), self.amount())
        logger.info("%s: submitting (amount=%s)", self.flow.name, request.amount)
        try:
            result = await self._submit(request)
        except Exception as e:
            logger.exception("%s: submit failed", self.flow.name)
            result = SubmitFailure(reason=str(e) or e.__class__.__name__)

        self.state.last_outcome = result
        if isinstance(result, SubmitSuccess):
            self.state.status = WizardStatus.COMPLETE
            logger.info("%s: complete", self.flow.name)
        else:
            self.state.status = WizardStatus.IN_PROGRESS
            logger.warning("%s: submit not confirmed (%s)", self.flow.name, result.reason)
        return True

    def retreat(self) -> Retreat:
        if self.state.status is WizardStatus.SUBMITTING:
            return Retreat.REJECTED
        if self.state.status is WizardStatus.COMPLETE or self.state.current_index == 0:
            return Retreat.EXIT_FLOW
        self.state.current_index -= 1
        return Retreat.RETREATED

    def select(self, step: str, value: Any) -> bool:
        if self.state.status is not WizardStatus.IN_PROGRESS:
            return False
        if step not in self.state.steps or self.state.steps.index(step) > self.state.current_index:
            return False
        if not self.is_selection_valid(step, value):
            return False

        self.state.selections[step] = value
        if self.flow.auto_advance and step == self.current_step and not self.is_last_step:
            self.state.current_index += 1
        return True

    def clear(self, step: str) -> bool:
        """Drop the selection of a clearable step (e.g. change the attached file)."""
        if self.state.status is not WizardStatus.IN_PROGRESS or step != self.current_step:
            return False
        rule = self.flow.rule(step)
        if rule is None or not rule.clearable:
            return False
        self.state.selections[step] = None
        return True

    def goto(self, index: int) -> bool:
        if self.state.status is not WizardStatus.IN_PROGRESS:
            return False
        if not 0 <= index < len(self.state.steps):
            return False
        if not all(self.can_advance(s) for s in self.state.steps[:index]):
            return False
        self.state.current_index = index
        return True

    def reset(self) -> bool:
        if self.state.status is not WizardStatus.IN_PROGRESS:
            return False
        self.state = WizardState.initial(self.flow.steps)
        return True
