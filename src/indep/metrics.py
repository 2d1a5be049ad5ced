"""Prometheus metrics for pool wiring.

Each recorder keeps its collectors in its own CollectorRegistry. Read them
through WiringMetrics.exposition() (the Prometheus text format), e.g.
`indep demo --metrics`, or register them into a shared registry that an
exporter already serves.
"""

import logging
from typing import Optional

from prometheus_client import CollectorRegistry, Counter, Gauge, generate_latest

from indep.config import IndepConfig

logger = logging.getLogger(__name__)


class WiringMetrics:
    """Record registrations and deliveries made by a Pool."""

    def __init__(self, enabled: bool = True, registry: Optional[CollectorRegistry] = None):
        """Initialize wiring metrics.

        Args:
            enabled: Whether metrics are recorded
            registry: Prometheus registry to register collectors in
                (default: a private registry per instance)
        """
        self.enabled = enabled
        self.registry = registry if registry is not None else CollectorRegistry()
        self._metrics = {}

        if enabled:
            self._metrics['registrations'] = Counter(
                'indep_pool_registrations_total',
                'Total providers registered into pools',
                registry=self.registry,
            )

            self._metrics['deliveries'] = Counter(
                'indep_pool_deliveries_total',
                'Capabilities delivered to consumers',
                ['mode'],
                registry=self.registry,
            )

            self._metrics['pool_size'] = Gauge(
                'indep_pool_size',
                'Number of providers in the pool',
                registry=self.registry,
            )

            logger.debug("Wiring metrics configured")

    @classmethod
    def from_config(cls, config: IndepConfig) -> "WiringMetrics":
        """Create a recorder honoring config.metrics_enabled."""
        return cls(enabled=config.metrics_enabled)

    def exposition(self) -> str:
        """Render the recorded metrics in the Prometheus text format."""
        return generate_latest(self.registry).decode("utf-8")

    def record_registration(self, pool_size: int) -> None:
        """Record a completed registration.

        Args:
            pool_size: Pool size after the registration
        """
        if not self.enabled:
            return

        self._metrics['registrations'].inc()
        self._metrics['pool_size'].set(pool_size)

    def record_deliveries(self, count: int, tagged: bool) -> None:
        """Record capability deliveries.

        Args:
            count: Number of accept() calls made
            tagged: Whether the deliveries carried tags (selective mode)
        """
        if not self.enabled or count == 0:
            return

        mode = 'selective' if tagged else 'broadcast'
        self._metrics['deliveries'].labels(mode=mode).inc(count)


__all__ = ["WiringMetrics"]
