from pydantic import BaseModel, ConfigDict


class ValueObject(BaseModel):
    """Immutable, compared by value. Frozen models are hashable and safe to
    share between concurrently running jobs."""

    model_config = ConfigDict(frozen=True)
