import asyncio

import pytest

from sonumarket.wizard.machine import (
    FlowBuilder,
    Retreat,
    SubmitFailure,
    SubmitSuccess,
    WizardMachine,
    WizardStatus,
    always,
)


def _flow(auto: bool = False):
    b = FlowBuilder("demo")
    if auto:
        b.auto_advance()
    return (
        b.step("a", validator=lambda v: isinstance(v, int))
        .step("b", validator=lambda v: isinstance(v, str), gate=always, clearable=True)
        .step("c", validator=lambda v: v in ("x", "y"))
        .amount(lambda s: s["a"] or 0)
        .build()
    )


class Recorder:
    def __init__(self, result=None, error=None):
        self.requests = []
        self.result = result or SubmitSuccess("ref-1")
        self.error = error

    async def __call__(self, request):
        self.requests.append(request)
        if self.error:
            raise self.error
        return self.result


def test_builder_rejects_bad_flows():
    with pytest.raises(ValueError):
        FlowBuilder("x").build()
    with pytest.raises(ValueError):
        FlowBuilder("x").step("a", validator=bool).step("a", validator=bool)


def test_initial_state():
    m = WizardMachine(_flow(), Recorder())
    assert m.current_index == 0
    assert m.status is WizardStatus.IN_PROGRESS
    assert dict(m.selections) == {"a": None, "b": None, "c": None}
    assert m.is_complete is False


@pytest.mark.asyncio
async def test_advance_requires_gate():
    m = WizardMachine(_flow(), Recorder())

    assert await m.advance() is False
    assert m.current_index == 0

    assert m.select("a", 3)
    assert await m.advance() is True
    assert m.current_step == "b"
    # "b" has an always-open gate
    assert await m.advance() is True
    assert m.current_step == "c"


def test_select_validates_and_ignores_future_steps():
    m = WizardMachine(_flow(), Recorder())

    assert m.select("a", "not an int") is False
    assert m.select("c", "x") is False
    assert m.select("zzz", 1) is False
    assert m.select("a", None) is False
    assert dict(m.selections) == {"a": None, "b": None, "c": None}


def test_auto_advance_on_select():
    m = WizardMachine(_flow(auto=True), Recorder())
    m.select("a", 1)
    assert m.current_step == "b"


@pytest.mark.asyncio
async def test_auto_advance_never_submits():
    rec = Recorder()
    m = WizardMachine(_flow(auto=True), rec)
    m.select("a", 1)
    m.select("b", "note")
    m.select("c", "x")

    assert m.current_step == "c"
    assert m.status is WizardStatus.IN_PROGRESS
    assert rec.requests == []


@pytest.mark.asyncio
async def test_submit_success_completes():
    rec = Recorder()
    m = WizardMachine(_flow(auto=True), rec)
    m.select("a", 7)
    m.select("b", "note")
    m.select("c", "y")

    assert await m.advance() is True
    assert m.status is WizardStatus.COMPLETE
    assert m.state.last_outcome == SubmitSuccess("ref-1")
    assert rec.requests[0].amount == 7
    assert rec.requests[0].selections == {"a": 7, "b": "note", "c": "y"}

    # terminal: everything is refused, back closes the flow
    assert await m.advance() is False
    assert m.select("a", 1) is False
    assert m.reset() is False
    assert m.retreat() is Retreat.EXIT_FLOW


@pytest.mark.asyncio
async def test_submit_failure_stays_on_last_step():
    m = WizardMachine(_flow(auto=True), Recorder(result=SubmitFailure("pending")))
    m.select("a", 1)
    m.select("b", "n")
    m.select("c", "x")

    assert await m.advance() is True
    assert m.status is WizardStatus.IN_PROGRESS
    assert m.current_step == "c"
    assert m.state.last_outcome == SubmitFailure("pending")
    # the user may pick another value and retry
    assert m.select("c", "y")


@pytest.mark.asyncio
async def test_submit_exception_is_a_failure(caplog):
    m = WizardMachine(_flow(auto=True), Recorder(error=RuntimeError("network down")))
    m.select("a", 1)
    m.select("b", "n")
    m.select("c", "x")

    assert await m.advance() is True
    assert m.status is WizardStatus.IN_PROGRESS
    assert m.state.last_outcome == SubmitFailure("network down")
    assert "submit failed" in caplog.text


def test_retreat():
    m = WizardMachine(_flow(auto=True), Recorder())
    assert m.retreat() is Retreat.EXIT_FLOW

    m.select("a", 1)
    assert m.retreat() is Retreat.RETREATED
    assert m.current_step == "a"
    # selections survive going back
    assert m.selections["a"] == 1


def test_retreat_rejected_while_submitting():
    m = WizardMachine(_flow(), Recorder())
    m.state.status = WizardStatus.SUBMITTING
    assert m.retreat() is Retreat.REJECTED
    assert m.select("a", 1) is False


def test_clear_only_clearable_current_step():
    m = WizardMachine(_flow(auto=True), Recorder())
    m.select("a", 1)
    m.select("b", "file")  # auto-advanced to "c"

    assert m.clear("b") is False  # not current
    m.retreat()
    assert m.clear("b") is True
    assert m.selections["b"] is None
    m.retreat()
    assert m.clear("a") is False  # not clearable


def test_goto_checks_prior_gates():
    m = WizardMachine(_flow(), Recorder())
    assert m.goto(2) is False
    m.select("a", 1)
    assert m.goto(2) is True
    assert m.current_step == "c"
    assert m.goto(0) is True
    assert m.goto(5) is False


def test_reset_clears_everything():
    m = WizardMachine(_flow(auto=True), Recorder())
    m.select("a", 1)
    assert m.reset() is True
    assert m.current_index == 0
    assert m.selections["a"] is None


def test_selections_view_is_read_only():
    m = WizardMachine(_flow(), Recorder())
    with pytest.raises(TypeError):
        m.selections["a"] = 1


@pytest.mark.asyncio
async def test_second_advance_rejected_while_submit_in_flight():
    release = asyncio.Event()
    calls = []

    async def slow_submit(request):
        calls.append(request)
        await release.wait()
        return SubmitSuccess("ref-2")

    m = WizardMachine(_flow(auto=True), slow_submit)
    m.select("a", 1)
    m.select("b", "n")
    m.select("c", "x")

    first = asyncio.create_task(m.advance())
    while not calls:
        await asyncio.sleep(0)

    assert m.status is WizardStatus.SUBMITTING
    assert await m.advance() is False
    assert m.select("c", "y") is False
    assert m.retreat() is Retreat.REJECTED

    release.set()
    assert await first is True
    assert len(calls) == 1
    assert m.status is WizardStatus.COMPLETE
    assert m.selections["c"] == "x"
