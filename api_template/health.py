"""
Api.Template — Health Check Registry
======================================

What:  Holds the named liveness checks reported by GET /health.
How:   A check is a zero-argument callable returning True when healthy.
       Exceptions raised by a check count as unhealthy and are logged.
       With no checks registered the service is always Healthy.
"""

import logging
from typing import Callable, Dict

logger = logging.getLogger(__name__)

HealthCheck = Callable[[], bool]

HEALTHY = "Healthy"
UNHEALTHY = "Unhealthy"


class HealthCheckRegistry:
    """Named health checks; aggregate status is Healthy only if all pass."""

    def __init__(self) -> None:
        self._checks: Dict[str, HealthCheck] = {}

    def add_check(self, name: str, check: HealthCheck) -> "HealthCheckRegistry":
        self._checks[name] = check
        return self

    def __len__(self) -> int:
        return len(self._checks)

    def run(self) -> str:
        status = HEALTHY
        for name, check in self._checks.items():
            try:
                ok = bool(check())
            except Exception as e:
                logger.warning("Health check '%s' raised: %s", name, str(e))
                ok = False
            if not ok:
                logger.warning("Health check '%s' reported unhealthy", name)
                status = UNHEALTHY
        return status
