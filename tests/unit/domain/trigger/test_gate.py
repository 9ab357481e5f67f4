import pytest

from artefact_mirror.domain.shared.error import ValidationError
from artefact_mirror.domain.trigger import Invocation, InvocationSource, Verdict, should_proceed


class TestShouldProceed:
    def test_config_change_success_proceeds(self):
        assert should_proceed(InvocationSource.CONFIG_CHANGE, Verdict.SUCCESS)

    def test_config_change_failure_blocks(self):
        assert not should_proceed(InvocationSource.CONFIG_CHANGE, Verdict.FAILURE)

    def test_config_change_without_verdict_blocks(self):
        assert not should_proceed(InvocationSource.CONFIG_CHANGE, None)

    @pytest.mark.parametrize("source", [InvocationSource.SCHEDULED, InvocationSource.MANUAL])
    @pytest.mark.parametrize("verdict", [None, Verdict.SUCCESS, Verdict.FAILURE])
    def test_scheduled_and_manual_always_proceed(self, source, verdict):
        assert should_proceed(source, verdict)


class TestInvocation:
    def test_defaults_to_manual_without_filter(self):
        invocation = Invocation()
        assert invocation.source is InvocationSource.MANUAL
        assert invocation.verdict is None
        assert invocation.target_filter == ""

    def test_accepts_string_values(self):
        invocation = Invocation(source="config-change", verdict="success")
        assert invocation.verdict is Verdict.SUCCESS

    def test_verdict_requires_config_change(self):
        with pytest.raises(ValidationError) as exc_info:
            Invocation(source=InvocationSource.MANUAL, verdict=Verdict.FAILURE)
        assert exc_info.value.field == "verdict"
