"""The Pool: append-only provider registry with pairwise cross-injection.

Each register() call wires the new provider against every provider
already in the pool, in both directions, before appending it. Two
providers that need each other are therefore fully wired as soon as both
are registered, whichever came first; there is no dependency graph, no
ordering step and no later resolution pass.

Usage:
    pool = Pool()
    pool.register(Impl1.new_provider(), tags=["t1_1"])
    pool.register(Impl2.new_provider())
    print(pool.summary())   # Impl1 as t1_1 (Trait1, Trait2) / Impl2 (Trait2)
"""

import logging
from dataclasses import dataclass
from typing import AbstractSet, Iterable, Iterator, List, Optional, Tuple

from indep.metrics import WiringMetrics
from indep.protocols import Dependency

logger = logging.getLogger(__name__)

SEGMENT_SEPARATOR = " / "


@dataclass(frozen=True)
class PoolEntry:
    """A registered provider and the tags it was registered with."""
    tags: Tuple[str, ...]
    provider: Dependency

    def describe(self) -> str:
        """Render the entry as one summary segment."""
        text = self.provider.identity()
        if self.tags:
            text += " as " + ", ".join(self.tags)
        kinds = ", ".join(str(imp) for imp in self.provider.capabilities())
        return f"{text} ({kinds})"


def _normalize_tags(tags: Optional[Iterable[str]]) -> Tuple[str, ...]:
    if tags is None:
        return ()
    if isinstance(tags, str):
        raise TypeError(f"tags must be a collection of strings, not a string ({tags!r})")
    if isinstance(tags, AbstractSet):
        # Unordered input: sort so summaries do not depend on hash order
        for tag in tags:
            if not isinstance(tag, str):
                raise TypeError(f"tags must be strings, got {tag!r}")
        return tuple(sorted(tags))
    normalized: List[str] = []
    for tag in tags:
        if not isinstance(tag, str):
            raise TypeError(f"tags must be strings, got {tag!r}")
        if tag not in normalized:
            normalized.append(tag)
    return tuple(normalized)


class Pool:
    """Append-only registry that wires providers into each other.

    Not safe for concurrent registration: callers sharing a pool across
    threads must serialize register() themselves.
    """

    def __init__(self, metrics: Optional[WiringMetrics] = None):
        """Initialize an empty pool.

        The rebind policy is not a pool setting: it belongs to the
        CapabilitySchema the registered components were declared against.

        Args:
            metrics: Metrics recorder (default: enabled, private registry)
        """
        self._metrics = metrics or WiringMetrics()
        self._entries: List[PoolEntry] = []

    @property
    def metrics(self) -> WiringMetrics:
        return self._metrics

    @property
    def entries(self) -> Tuple[PoolEntry, ...]:
        """Registered entries, in registration order."""
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[PoolEntry]:
        return iter(tuple(self._entries))

    def register(self, provider: Dependency, tags: Optional[Iterable[str]] = None) -> None:
        """Register a provider and cross-wire it with every prior provider.

        For each prior entry, in registration order, the new provider's
        capabilities are delivered to the prior consumer with the new tags,
        then the prior provider's capabilities are delivered to the new
        consumer with the prior tags.

        Args:
            provider: Provider to register
            tags: Slot names to target; empty or None broadcasts. Ordered
                collections keep their order in summary(), sets are sorted

        Raises:
            TypeError: If provider does not satisfy the Dependency contract,
                or tags is not a collection of strings
            ExclusiveAccessError: If a consumer involved is already borrowed
                (for instance when the same provider is registered twice).
                The provider is not appended in that case.
        """
        if not isinstance(provider, Dependency):
            raise TypeError(f"{provider!r} does not implement the Dependency contract")
        tags = _normalize_tags(tags)

        outgoing = 0
        incoming_tagged = 0
        incoming_untagged = 0

        with provider.as_consumer().borrow_mut() as consumer:
            for entry in self._entries:
                with entry.provider.as_consumer().borrow_mut() as prior:
                    for capability in provider.capabilities():
                        prior.accept(capability, tags)
                        outgoing += 1

                    for capability in entry.provider.capabilities():
                        consumer.accept(capability, entry.tags)
                        if entry.tags:
                            incoming_tagged += 1
                        else:
                            incoming_untagged += 1

        self._entries.append(PoolEntry(tags=tags, provider=provider))
        logger.debug(
            f"Registered {provider.identity()} "
            f"(tags={list(tags)}, pool size={len(self._entries)})"
        )

        self._metrics.record_deliveries(outgoing, tagged=bool(tags))
        self._metrics.record_deliveries(incoming_tagged, tagged=True)
        self._metrics.record_deliveries(incoming_untagged, tagged=False)
        self._metrics.record_registration(len(self._entries))

    def summary(self) -> str:
        """Describe the pool content, one segment per entry in registration order.

        Returns:
            "<identity>[ as <tags>] (<kinds>)" segments joined by " / ";
            an empty string for an empty pool
        """
        return SEGMENT_SEPARATOR.join(entry.describe() for entry in self._entries)

    def __repr__(self) -> str:
        return f"Pool({len(self._entries)} providers)"


__all__ = [
    "Pool",
    "PoolEntry",
]
