"""
Receptor Wire Models.

Pydantic models for the receptor's desired/actual LRP API. Field names
match the receptor's JSON keys; aliases cover keys that are not valid
Python identifiers.

Actions are serialized wrapped in a single-key object naming their type:

    RunAction(path="/app")        → {"run": {"path": "/app", ...}}
    DownloadAction(from_="...")   → {"download": {"from": "...", ...}}
"""

from enum import Enum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class _ReceptorModel(BaseModel):
    """Base for receptor payloads. Ignores keys newer receptors may add."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class EnvironmentVariable(_ReceptorModel):
    name: str
    value: str


class RunAction(_ReceptorModel):
    """Run an executable inside the container."""

    ACTION_NAME: ClassVar[str] = "run"

    path: str
    args: list[str] = Field(default_factory=list)
    env: list[EnvironmentVariable] = Field(default_factory=list)
    privileged: bool = False
    log_source: str = ""


class DownloadAction(_ReceptorModel):
    """Download and extract an archive into the container."""

    ACTION_NAME: ClassVar[str] = "download"

    from_: str = Field(alias="from")
    to: str
    cache_key: str = ""


def wrap_action(action: RunAction | DownloadAction | None) -> dict[str, Any] | None:
    """Serialize an action in the receptor's {"<type>": {...}} envelope."""
    if action is None:
        return None
    return {action.ACTION_NAME: action.model_dump(mode="json", by_alias=True)}


class DesiredLRPCreateRequest(_ReceptorModel):
    """Body of POST /v1/desired_lrps."""

    process_guid: str
    domain: str
    root_fs: str = Field(alias="rootfs")
    instances: int = Field(ge=0)
    stack: str
    env: list[EnvironmentVariable] = Field(default_factory=list)
    setup: DownloadAction | None = None
    action: RunAction
    monitor: RunAction | None = None
    disk_mb: int = 0
    memory_mb: int = 0
    cpu_weight: int = 0
    ports: list[int] = Field(default_factory=list)
    routes: list[str] = Field(default_factory=list)
    log_guid: str = ""
    log_source: str = ""
    annotation: str = ""

    @field_serializer("setup", "action", "monitor")
    def _serialize_action(self, action: RunAction | DownloadAction | None) -> dict[str, Any] | None:
        return wrap_action(action)


class DesiredLRPUpdateRequest(_ReceptorModel):
    """
    Body of PUT /v1/desired_lrps/:process_guid.

    A partial update: unset fields are excluded from the payload and left
    untouched by the receptor.
    """

    instances: int | None = Field(default=None, ge=0)
    routes: list[str] | None = None
    annotation: str | None = None


class DesiredLRPResponse(_ReceptorModel):
    """One entry of GET /v1/desired_lrps."""

    process_guid: str
    domain: str = ""
    root_fs: str = Field(default="", alias="rootfs")
    instances: int = 0
    stack: str = ""
    env: list[EnvironmentVariable] = Field(default_factory=list)
    setup: dict[str, Any] | None = None
    action: dict[str, Any] | None = None
    monitor: dict[str, Any] | None = None
    disk_mb: int = 0
    memory_mb: int = 0
    cpu_weight: int = 0
    ports: list[int] = Field(default_factory=list)
    routes: list[str] = Field(default_factory=list)
    log_guid: str = ""
    log_source: str = ""
    annotation: str = ""


class ActualLRPState(str, Enum):
    UNCLAIMED = "UNCLAIMED"
    CLAIMED = "CLAIMED"
    RUNNING = "RUNNING"
    CRASHED = "CRASHED"


class ActualLRPResponse(_ReceptorModel):
    """One entry of GET /v1/actual_lrps/:process_guid."""

    process_guid: str
    instance_guid: str = ""
    cell_id: str = ""
    domain: str = ""
    index: int = 0
    address: str = ""
    ports: list[dict[str, int]] = Field(default_factory=list)
    state: ActualLRPState
    since: int = 0
