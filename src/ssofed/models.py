"""Base Pydantic models for ssofed.

All models that cross a component boundary inherit from :class:`SsoBaseModel`:

- Strict field validation (no extra fields allowed)
- Immutable instances, safe to share between concurrent login attempts

Models that parse remote responses override ``extra`` to ``"ignore"`` since the
identity service may return fields we do not care about.
"""

from pydantic import BaseModel, ConfigDict


class SsoBaseModel(BaseModel):
    """Base model for all ssofed Pydantic models.

    - extra="forbid": Rejects any fields not defined in the model
    - frozen=True: Makes instances immutable
    """

    model_config = ConfigDict(extra="forbid", frozen=True)
