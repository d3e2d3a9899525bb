"""Node self-test.

The peer registry only accepts advertisements once this node has verified
that it can actually serve pods: the daemon answers and a public URI is set.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import structlog

from ..models.errors import HyperError
from .hyper import HyperClient

logger = structlog.get_logger(__name__)


@dataclass
class SelfTestCheck:
    """Outcome of a single self-test check."""

    name: str
    passed: bool
    message: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "passed": self.passed, "message": self.message}


class SelfTestService:
    """Runs the node checks and exposes the resulting gate."""

    def __init__(
        self,
        hyper_client: HyperClient,
        public_uri: Optional[str] = None,
        enabled: bool = True,
    ):
        self.hyper_client = hyper_client
        self.public_uri = public_uri
        self.enabled = enabled
        self.self_test_success: bool = False
        self.results: List[SelfTestCheck] = []
        self.last_run: Optional[datetime] = None

    async def run(self) -> bool:
        """Run all checks and update ``self_test_success``."""
        if not self.enabled:
            logger.warning("Self-test disabled, peer discovery writes are accepted unchecked")
            self.results = [SelfTestCheck("self_test", True, "disabled by configuration")]
        else:
            self.results = [
                await self._check_daemon(),
                self._check_public_uri(),
            ]

        self.self_test_success = all(check.passed for check in self.results)
        self.last_run = datetime.now(timezone.utc)

        if self.self_test_success:
            logger.info("Self-test passed")
        else:
            logger.error(
                "Self-test failed",
                failed=[check.name for check in self.results if not check.passed],
            )
        return self.self_test_success

    async def _check_daemon(self) -> SelfTestCheck:
        if self.hyper_client.noop:
            return SelfTestCheck("hyperd", True, "dry-run mode")

        try:
            await self.hyper_client.get_daemon_info()
        except HyperError as e:
            return SelfTestCheck("hyperd", False, e.message)
        return SelfTestCheck("hyperd", True, "daemon reachable")

    def _check_public_uri(self) -> SelfTestCheck:
        if not self.public_uri:
            return SelfTestCheck("public_uri", False, "PUBLIC_URI is not configured")
        return SelfTestCheck("public_uri", True, self.public_uri)

    def to_dict(self) -> Dict[str, Any]:
        """Summary for health endpoints."""
        return {
            "success": self.self_test_success,
            "last_run": self.last_run.isoformat() if self.last_run else None,
            "checks": [check.to_dict() for check in self.results],
        }
