"""Sample components wired from the packaged demo deployment.

Impl1 provides Trait1 and Trait2 and needs nothing. Impl2 provides Trait2
and needs a Trait1 in slot ``t1``. Impl3 provides Trait3 and needs a
Trait1 in ``t1_1`` plus two Trait2 instances in ``t2_1`` and ``t2_2``.

The component bodies below are plain classes. load_demo() reads demo.yaml
under a given IndepConfig and binds a fresh subclass of each body to it, so
settings such as the rebind policy reach the demo run that asked for them.

build_demo_pool() registers Impl1 tagged ``t1_1`` (so it reaches only
Impl3's ``t1_1`` slot), then Impl2 and Impl3 untagged. Impl2's ``t1``
slot stays unbound in that layout, which run_lifecycle() reports.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Protocol

from indep.component import require
from indep.config import IndepConfig
from indep.deployment import Deployment, load_deployment
from indep.errors import MissingDependencyError
from indep.metrics import WiringMetrics
from indep.pool import Pool

logger = logging.getLogger(__name__)

DEMO_DEPLOYMENT_PATH = Path(__file__).parent / "demo.yaml"


# =============================================================================
# CAPABILITY INTERFACES
# =============================================================================

class Base(Protocol):
    """Lifecycle capability shared by every demo component."""
    def init(self) -> str: ...


class Trait1(Protocol):
    def do1(self) -> str: ...


class Trait2(Protocol):
    def do2(self) -> str: ...


class Trait3(Protocol):
    def do3(self) -> str: ...


# =============================================================================
# COMPONENTS
# =============================================================================

class Impl1:
    def foo(self) -> str:
        return "foo from Impl1"

    def do1(self) -> str:
        return self.foo()

    def do2(self) -> str:
        return "Impl1 says 'Trait2'"

    def init(self) -> str:
        return self.foo()


class Impl2:
    def boo(self) -> str:
        with require(self, "t1").borrow() as t1:
            return f"boo from Impl2, {t1.do1()}"

    def do2(self) -> str:
        self.boo()
        return "Impl2 says 'Trait2'"

    def init(self) -> str:
        return self.boo()


class Impl3:
    def oo(self) -> str:
        with require(self, "t2_1").borrow() as b1:
            first = b1.do2()
        with require(self, "t2_2").borrow() as b2:
            second = b2.do2()
        with require(self, "t1_1").borrow() as b3:
            third = b3.do1()
        return f"oo from Impl3: 1: {first} 2: {second} ({third})"

    def do3(self) -> str:
        return self.oo()

    def init(self) -> str:
        return self.oo()


COMPONENT_BODIES = (Impl1, Impl2, Impl3)


# =============================================================================
# DRIVER
# =============================================================================

@dataclass(frozen=True)
class Demo:
    """The demo deployment with its component classes bound to it."""
    deployment: Deployment
    components: Dict[str, type]

    def build_pool(self, tag_impl1: bool = True, metrics: Optional[WiringMetrics] = None) -> Pool:
        """Register the three demo components.

        Args:
            tag_impl1: Register Impl1 tagged "t1_1" instead of broadcasting it
            metrics: Metrics recorder for the pool

        Returns:
            Pool holding Impl1, Impl2 and Impl3, in that order
        """
        pool = Pool(metrics=metrics)
        pool.register(
            self.components["Impl1"].new_provider(),
            tags=["t1_1"] if tag_impl1 else None,
        )
        pool.register(self.components["Impl2"].new_provider())
        pool.register(self.components["Impl3"].new_provider())
        return pool


def load_demo(config: Optional[IndepConfig] = None) -> Demo:
    """Load demo.yaml and bind the demo component bodies to it.

    Args:
        config: Container configuration (default: IndepConfig())

    Returns:
        Demo whose component classes follow the given configuration
    """
    deployment = load_deployment(DEMO_DEPLOYMENT_PATH, config=config)
    components: Dict[str, type] = {}
    for body in COMPONENT_BODIES:
        bound = type(body.__name__, (body,), {"__module__": __name__, "__doc__": body.__doc__})
        components[body.__name__] = deployment.bind()(bound)
    return Demo(deployment=deployment, components=components)


def build_demo_pool(
    tag_impl1: bool = True,
    config: Optional[IndepConfig] = None,
    metrics: Optional[WiringMetrics] = None,
) -> Pool:
    """Load the demo under config and register its components.

    Args:
        tag_impl1: Register Impl1 tagged "t1_1" instead of broadcasting it
        config: Container configuration (default: IndepConfig())
        metrics: Metrics recorder for the pool

    Returns:
        Pool holding Impl1, Impl2 and Impl3, in that order
    """
    return load_demo(config).build_pool(tag_impl1=tag_impl1, metrics=metrics)


def run_lifecycle(pool: Pool) -> Dict[str, str]:
    """Call init() on every component through its base handle.

    Args:
        pool: Wired pool

    Returns:
        identity -> init() output, or the missing dependency message
    """
    results: Dict[str, str] = {}
    for entry in pool:
        identity = entry.provider.identity()
        with entry.provider.as_base().borrow_mut() as base:
            try:
                results[identity] = base.init()
            except MissingDependencyError as e:
                logger.warning(f"{identity} cannot start: {e}")
                results[identity] = f"missing dependency: {e}"
    return results


__all__ = [
    "Base",
    "Trait1",
    "Trait2",
    "Trait3",
    "Impl1",
    "Impl2",
    "Impl3",
    "Demo",
    "DEMO_DEPLOYMENT_PATH",
    "build_demo_pool",
    "load_demo",
    "run_lifecycle",
]
