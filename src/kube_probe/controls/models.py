"""Request and response models exchanged with the control dispatcher."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ControlRequest(BaseModel):
    """A remote command targeting one topology node."""

    model_config = ConfigDict(frozen=True)

    app_id: str = Field(..., description="Application session the request came from")
    node_id: str = Field(..., description="Topology node identifier of the target")
    control: str = Field(..., description="Control identifier being invoked")
    payload: dict[str, Any] = Field(default_factory=dict, description="Opaque control payload")


class ControlResponse(BaseModel):
    """Outcome of a control.

    At most one field is populated. An empty response means the control
    succeeded with nothing to report.
    """

    model_config = ConfigDict(frozen=True)

    value: str | None = Field(None, description="Scalar result, e.g. an acknowledged control id")
    removed_node: str | None = Field(None, description="Node id removed by the control")
    pipe: str | None = Field(None, description="Id of a pipe opened for the caller")
    error: str | None = Field(None, description="Error message")

    @model_validator(mode="after")
    def _single_field(self) -> ControlResponse:
        populated = [
            name
            for name in ("value", "removed_node", "pipe", "error")
            if getattr(self, name) is not None
        ]
        if len(populated) > 1:
            raise ValueError(f"ControlResponse populates more than one field: {populated}")
        return self

    @property
    def is_error(self) -> bool:
        """Check if this response reports an error."""
        return self.error is not None

    @classmethod
    def from_error(cls, error: BaseException | str) -> ControlResponse:
        """Build an error response from an exception or message."""
        return cls(error=str(error))


ControlHandler = Callable[[ControlRequest], ControlResponse]
"""A bound control: takes a request, returns exactly one response."""
