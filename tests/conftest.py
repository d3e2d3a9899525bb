"""Pytest configuration and shared fixtures."""

import json
import os
from typing import Callable, List

import httpx
import pytest

# Set test environment before importing config
os.environ["HYPER_SOCKET"] = "/tmp/podgate-test-hyper.sock"
os.environ["HYPER_NOOP"] = "false"
os.environ["PUBLIC_URI"] = "https://node.example.com"
os.environ["SELF_TEST_ENABLED"] = "true"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ.pop("PEERS_FILE", None)
os.environ.pop("BOOTSTRAP_PEERS", None)

from podgate.config.hyper import HyperConfig
from podgate.models.pod import PodSpec
from podgate.services.hyper import DaemonTransport, HyperClient


class DaemonStub:
    """Fake hyperd answering from a route table and recording requests.

    Routes map ``(method, path)`` to an ``httpx.Response`` or to a callable
    taking the request and returning one.
    """

    def __init__(self):
        self.routes = {}
        self.requests: List[httpx.Request] = []

    def route(self, method: str, path: str, response):
        self.routes[(method, path)] = response
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        answer = self.routes.get((request.method, request.url.path))
        if answer is None:
            return httpx.Response(404, text="no such route")
        if callable(answer):
            return answer(request)
        return answer

    def calls(self) -> List[tuple]:
        return [(r.method, r.url.path) for r in self.requests]

    def json_body(self, index: int):
        return json.loads(self.requests[index].content)


@pytest.fixture
def daemon() -> DaemonStub:
    """Route table for a fake daemon."""
    return DaemonStub()


@pytest.fixture
def daemon_transport(daemon) -> DaemonTransport:
    """DaemonTransport whose socket traffic is served by the fake daemon."""
    return DaemonTransport(
        "/tmp/podgate-test-hyper.sock",
        request_timeout=5.0,
        connect_timeout=1.0,
        transport=httpx.MockTransport(daemon.handler),
    )


@pytest.fixture
def hyper_client(daemon_transport) -> HyperClient:
    """Pod lifecycle client talking to the fake daemon."""
    return HyperClient(daemon_transport)


@pytest.fixture
def noop_client() -> HyperClient:
    """Pod lifecycle client in dry-run mode."""
    return HyperClient.from_config(HyperConfig(hyper_noop=True))


@pytest.fixture
def pod_spec() -> PodSpec:
    """Single-container pod spec."""
    return PodSpec.model_validate(
        {"id": "pod1", "containers": [{"image": "alpine"}], "memory": 128, "vcpu": 1}
    )


@pytest.fixture
def multi_container_spec() -> PodSpec:
    """Pod spec with three containers A, B and C."""
    return PodSpec.model_validate(
        {
            "id": "pod-abc",
            "containers": [{"image": "A"}, {"image": "B"}, {"image": "C"}],
            "memory": 256,
            "vcpu": 2,
        }
    )


@pytest.fixture
def pod_info_body() -> Callable[..., dict]:
    """Build a daemon PodInfo body."""

    def build(pod_id: str = "pod1", pod_ip=None, phase: str = "running") -> dict:
        return {
            "podID": pod_id,
            "podName": pod_id,
            "kind": "Pod",
            "apiVersion": "v1beta1",
            "vm": "vm-abc",
            "createdAt": 1700000000,
            "spec": {
                "containers": [
                    {
                        "args": [],
                        "containerID": "c1",
                        "env": [],
                        "image": "alpine",
                        "imageID": "sha256:1234",
                        "name": "alpine-1",
                        "volumeMounts": [],
                        "workingDir": "",
                    }
                ],
                "memory": 128,
                "vcpu": 1,
                "volumes": [],
            },
            "status": {
                "phase": phase,
                "hostIP": "192.168.1.10",
                "podIP": ["10.0.0.2/24"] if pod_ip is None else pod_ip,
                "containerStatus": [
                    {
                        "containerID": "c1",
                        "name": "alpine-1",
                        "phase": phase,
                        "running": {"startedAt": "2024-01-01T00:00:00Z"},
                        "terminated": {},
                        "waiting": {},
                    }
                ],
            },
        }

    return build
