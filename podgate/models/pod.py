"""Pod data models exchanged with the hyperd daemon.

Field names follow the daemon's camelCase wire format through aliases;
Python code uses the snake_case attribute names.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PodPhase(str, Enum):
    """Pod and container phases reported by the daemon."""

    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TERMINATED = "terminated"
    UNKNOWN = "unknown"


class _SpecModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")


class EnvVar(_SpecModel):
    """Environment variable passed to a container."""

    env: str = Field(..., min_length=1)
    value: str = ""


class VolumeMount(_SpecModel):
    """Mount of a pod volume inside a container."""

    name: str = Field(..., min_length=1)
    mount_path: str = Field(..., alias="mountPath", min_length=1)
    read_only: Optional[bool] = Field(None, alias="readOnly")


class Container(_SpecModel):
    """Container descriptor within a pod spec."""

    image: str = Field(..., min_length=1)
    name: Optional[str] = None
    args: List[str] = Field(default_factory=list)
    env: List[EnvVar] = Field(default_factory=list)
    volume_mounts: List[VolumeMount] = Field(default_factory=list, alias="volumeMounts")
    working_dir: Optional[str] = Field(None, alias="workingDir")


class Volume(_SpecModel):
    """Volume backing one or more container mounts."""

    name: str = Field(..., min_length=1)
    source: str = ""
    driver: str = ""


class PodSpec(_SpecModel):
    """Declarative description of a pod.

    The ``id`` is the only handle used for later start, delete and log calls.
    Instances are immutable.
    """

    id: str = Field(..., min_length=1, max_length=255)
    containers: List[Container] = Field(..., min_length=1)
    memory: Optional[int] = Field(None, ge=1, description="Memory limit in MB")
    vcpu: Optional[int] = Field(None, ge=1, description="Virtual CPU count")
    volumes: List[Volume] = Field(default_factory=list)

    @property
    def images(self) -> List[str]:
        """Container images in spec order."""
        return [container.image for container in self.containers]

    def to_daemon_payload(self) -> Dict[str, Any]:
        """Serialize to the JSON body expected by ``POST /pod/create``.

        Only fields the caller actually set are sent.
        """
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True, exclude_none=True)


# Daemon view of a pod. The daemon may add fields; they are kept, not rejected.


class _InfoModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")


def _null_as_empty(value: Any) -> Any:
    # hyperd encodes empty lists as null
    return [] if value is None else value


class ContainerRunningState(_InfoModel):
    started_at: Optional[str] = Field(None, alias="startedAt")


class ContainerStatus(_InfoModel):
    """Status of one container inside a pod."""

    container_id: str = Field("", alias="containerID")
    name: str = ""
    phase: str = ""
    running: Optional[ContainerRunningState] = None
    terminated: Optional[Dict[str, Any]] = None
    waiting: Optional[Dict[str, Any]] = None

    @property
    def state(self) -> Optional[str]:
        """Terminal sub-state: ``running``, ``terminated`` or ``waiting``."""
        if self.running is not None and self.running.started_at:
            return "running"
        if self.terminated:
            return "terminated"
        if self.waiting:
            return "waiting"
        return None


class PodStatus(_InfoModel):
    """Pod status block of a PodInfo response."""

    phase: str = PodPhase.PENDING.value
    host_ip: str = Field("", alias="hostIP")
    pod_ip: List[str] = Field(default_factory=list, alias="podIP")
    container_status: List[ContainerStatus] = Field(default_factory=list, alias="containerStatus")

    @field_validator("pod_ip", "container_status", mode="before")
    @classmethod
    def null_lists_as_empty(cls, v):
        return _null_as_empty(v)

    @property
    def is_running(self) -> bool:
        return self.phase.lower() == PodPhase.RUNNING.value


class PodInfoContainer(_InfoModel):
    """Container entry of the spec echoed back by the daemon."""

    image: str = ""
    image_id: str = Field("", alias="imageID")
    container_id: str = Field("", alias="containerID")
    name: str = ""
    args: Optional[List[str]] = None
    env: Optional[List[Dict[str, Any]]] = None
    volume_mounts: Optional[Any] = Field(None, alias="volumeMounts")
    working_dir: Optional[str] = Field(None, alias="workingDir")


class PodInfoSpec(_InfoModel):
    containers: List[PodInfoContainer] = Field(default_factory=list)
    memory: Optional[int] = None
    vcpu: Optional[int] = None
    volumes: Optional[List[Dict[str, Any]]] = None

    @field_validator("containers", mode="before")
    @classmethod
    def null_containers_as_empty(cls, v):
        return _null_as_empty(v)


class PodInfo(_InfoModel):
    """The daemon's view of a pod, fetched on demand and never cached."""

    pod_id: str = Field("", alias="podID")
    pod_name: str = Field("", alias="podName")
    kind: str = ""
    api_version: str = Field("", alias="apiVersion")
    vm: str = ""
    created_at: int = Field(0, alias="createdAt")
    spec: Optional[PodInfoSpec] = None
    status: PodStatus = Field(default_factory=PodStatus)


# API responses


class PodRunResponse(BaseModel):
    """Result of provisioning a pod."""

    id: str
    status: str = PodPhase.RUNNING.value


class PodIPResponse(BaseModel):
    """Address assigned to a pod."""

    id: str
    ip: str
