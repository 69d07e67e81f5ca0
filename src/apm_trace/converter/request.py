"""Concrete request snapshot.

RecordedRequest holds everything the builder needs from a finished request
in one validated Pydantic model, so requests captured elsewhere can be
written to JSON and converted later.
"""

from pathlib import Path
from typing import Any

import orjson
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from apm_trace.converter.types import CallFrame
from apm_trace.errors import RequestSnapshotError
from apm_trace.telemetry import SNAPSHOT_LOADED, get_logger

log = get_logger(__name__)


class FlatContext(BaseModel):
    """Request context whose values are already flat key/value pairs."""

    values: dict[str, Any] = Field(default_factory=dict)

    def to_flat_dict(self) -> dict[str, Any]:
        return dict(self.values)


class RecordedRequest(BaseModel):
    """Snapshot of a finished request."""

    unique_name: str = Field(..., description="Stable request name, e.g. 'Controller/users/index'")
    root_frame: CallFrame | None = Field(None, alias="root")
    web: bool = False
    job: bool = False
    annotations: dict[str, Any] = Field(default_factory=dict)
    context: FlatContext = Field(default_factory=FlatContext)
    mem_delta_mb: float = Field(0.0, description="Memory growth over the request in MB")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("annotations", mode="before")
    @classmethod
    def default_annotations(cls, v: dict[str, Any] | None) -> dict[str, Any]:
        return {} if v is None else v

    def capture_mem_delta(self) -> float:
        return self.mem_delta_mb

    def is_web(self) -> bool:
        return self.web

    def is_job(self) -> bool:
        return self.job


def load_request(path: Path) -> RecordedRequest:
    """Load a request snapshot from a JSON file.

    The file holds a RecordedRequest object; ``context`` may be given as a
    plain mapping of key/value pairs.

    Args:
        path: JSON file to read.

    Returns:
        Validated RecordedRequest.

    Raises:
        RequestSnapshotError: If the file is missing, not JSON, or invalid.
    """
    try:
        raw = orjson.loads(path.read_bytes())
    except OSError as e:
        raise RequestSnapshotError(f"Cannot read {path}: {e}") from e
    except orjson.JSONDecodeError as e:
        raise RequestSnapshotError(f"{path} is not valid JSON: {e}") from e

    if not isinstance(raw, dict):
        raise RequestSnapshotError(f"{path} must contain a JSON object")

    context = raw.get("context")
    if isinstance(context, dict) and "values" not in context:
        raw["context"] = {"values": context}

    try:
        request = RecordedRequest.model_validate(raw)
    except ValidationError as e:
        raise RequestSnapshotError(f"{path} is not a valid request snapshot: {e}") from e

    log.debug(SNAPSHOT_LOADED, path=str(path), request=request.unique_name)
    return request
