from ryumodmanager.state_machine import PipelineEvent, PipelineState, PipelineStateMachine


def test_state_machine_happy_path():
    sm = PipelineStateMachine()
    assert sm.state == PipelineState.CONFIGURING

    sm.transition(PipelineEvent.CONFIGURED)
    assert sm.state == PipelineState.RECONCILING

    sm.transition(PipelineEvent.RECONCILED)
    assert sm.state == PipelineState.PATCHING

    sm.transition(PipelineEvent.PATCHED)
    assert sm.state == PipelineState.GENERATING

    sm.transition(PipelineEvent.GENERATED)
    assert sm.state == PipelineState.VALIDATING

    sm.transition(PipelineEvent.VALIDATED)
    assert sm.state == PipelineState.DONE
    assert sm.finished


def test_state_machine_abort_only_from_generating():
    sm = PipelineStateMachine()
    sm.transition(PipelineEvent.ABORT)
    assert sm.state == PipelineState.CONFIGURING

    sm.transition(PipelineEvent.CONFIGURED)
    sm.transition(PipelineEvent.RECONCILED)
    sm.transition(PipelineEvent.PATCHED)
    sm.transition(PipelineEvent.ABORT)
    assert sm.state == PipelineState.ABORTED
    assert sm.finished

    sm.transition(PipelineEvent.VALIDATED)
    assert sm.state == PipelineState.ABORTED
