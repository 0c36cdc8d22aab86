import pytest

from common.errors import PipelineCancelled, PipelineError
from common.pipeline import HEADER_RULE, PipelineState, StepPipeline


def test_pipeline_runs_steps_in_order():
    calls = []
    pipeline = StepPipeline([
        ("First", lambda: calls.append("first")),
        ("Second", lambda: calls.append("second")),
    ])

    pipeline.run()

    assert calls == ["first", "second"]
    assert pipeline.state == PipelineState.COMPLETED
    assert pipeline.executed == ["First", "Second"]
    assert pipeline.current_index == 2


def test_pipeline_stops_at_first_failure():
    calls = []

    def failing_step():
        calls.append("B")
        raise RuntimeError("npm exploded")

    pipeline = StepPipeline([
        ("Step A", lambda: calls.append("A")),
        ("Step B", failing_step),
        ("Step C", lambda: calls.append("C")),
    ])

    with pytest.raises(PipelineError) as exc_info:
        pipeline.run()

    error = exc_info.value
    assert calls == ["A", "B"]
    assert error.step_label == "Step B"
    assert error.step_index == 2
    assert error.total_steps == 3
    assert "Step B" in str(error)
    assert "npm exploded" in str(error)
    assert isinstance(error.cause, RuntimeError)
    assert error.__cause__ is error.cause
    assert pipeline.state == PipelineState.FAILED
    assert pipeline.current_index == 2
    assert pipeline.executed == ["Step A"]


def test_pipeline_false_return_is_failure():
    later_step_ran = []
    pipeline = StepPipeline([
        ("Verify", lambda: False),
        ("After", lambda: later_step_ran.append(True)),
    ])

    with pytest.raises(PipelineError) as exc_info:
        pipeline.run()

    assert str(exc_info.value) == "Verify: step reported failure"
    assert exc_info.value.cause is None
    assert later_step_ran == []


def test_pipeline_cancellation_propagates_unwrapped():
    later_step_ran = []

    def cancel():
        raise PipelineCancelled("Installation cancelled.")

    pipeline = StepPipeline([
        ("Check existing", cancel),
        ("Install", lambda: later_step_ran.append(True)),
    ])

    with pytest.raises(PipelineCancelled):
        pipeline.run()

    assert pipeline.state == PipelineState.CANCELLED
    assert later_step_ran == []


def test_pipeline_emits_numbered_headers(mock_logger):
    StepPipeline(
        [("Install root", lambda: None), ("Install backend", lambda: None)],
        pipeline_logger=mock_logger,
    ).run()

    mock_logger.info.assert_any_call("\n[1/2] Install root", exc_info=False)
    mock_logger.info.assert_any_call("\n[2/2] Install backend", exc_info=False)
    mock_logger.info.assert_any_call(HEADER_RULE, exc_info=False)


def test_empty_pipeline_completes():
    pipeline = StepPipeline([])

    pipeline.run()

    assert pipeline.state == PipelineState.COMPLETED
    assert pipeline.current_index == 0


def test_steps_are_numbered_from_one():
    pipeline = StepPipeline([("a", lambda: None), ("b", lambda: None), ("c", lambda: None)])

    assert [(step.index, step.total) for step in pipeline.steps] == [(1, 3), (2, 3), (3, 3)]
    assert pipeline.state == PipelineState.PENDING
