from artefact_mirror.domain.trigger.gate import (
    Invocation,
    InvocationSource,
    Verdict,
    should_proceed,
)

__all__ = [
    "Invocation",
    "InvocationSource",
    "Verdict",
    "should_proceed",
]
