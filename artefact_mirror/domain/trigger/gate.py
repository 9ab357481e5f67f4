"""Trigger gate - decides whether a run may go ahead.

Only runs triggered by a configuration change depend on validation.
Scheduled and manual runs always proceed so operators keep a way to force
a mirror even when the last configuration push was never validated.
"""

from enum import StrEnum

from pydantic import model_validator

from artefact_mirror.domain.shared.error import ValidationError
from artefact_mirror.domain.shared.model.value import ValueObject


class InvocationSource(StrEnum):
    CONFIG_CHANGE = "config-change"
    SCHEDULED = "scheduled"
    MANUAL = "manual"


class Verdict(StrEnum):
    SUCCESS = "success"
    FAILURE = "failure"


class Invocation(ValueObject):
    """How a run was started, and what it should mirror."""

    source: InvocationSource = InvocationSource.MANUAL
    verdict: Verdict | None = None  # upstream validation result, config-change only
    target_filter: str = ""  # exact artifact name; empty means all

    @model_validator(mode="after")
    def _verdict_only_for_config_change(self) -> "Invocation":
        if self.verdict is not None and self.source != InvocationSource.CONFIG_CHANGE:
            raise ValidationError(
                f"a validation verdict only applies to {InvocationSource.CONFIG_CHANGE} runs",
                field="verdict",
            )
        return self


def should_proceed(source: InvocationSource, verdict: Verdict | None) -> bool:
    """Return True if matrix expansion and execution may run.

    A config-change run without a verdict is treated as unvalidated and
    does not proceed.
    """
    if source == InvocationSource.CONFIG_CHANGE:
        return verdict == Verdict.SUCCESS
    return True
