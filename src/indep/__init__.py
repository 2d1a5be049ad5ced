"""indep - runtime component wiring.

Components expose capabilities (interfaces) and declare named slots for
the capabilities they need. A Pool wires them pairwise as they are
registered, in both directions, so mutually dependent components resolve
whatever order they arrive in.

Usage:
    from indep import CapabilitySchema, Pool

    schema = CapabilitySchema("Base", ["Trait1", "Trait2"])

    @schema.component(provides=["Trait1"])
    class Impl1:
        ...

    @schema.component(provides=["Trait2"], requires={"t1": "Trait1"})
    class Impl2:
        ...

    pool = Pool()
    pool.register(Impl2.new_provider())
    pool.register(Impl1.new_provider())
    print(pool.summary())
"""

from indep.component import (
    ComponentDeclaration,
    ComponentProvider,
    SlotDeclaration,
    bindings,
    component,
    declaration_of,
    require,
)
from indep.config import IndepConfig, RebindPolicy
from indep.deployment import Deployment, load_deployment, parse_deployment
from indep.errors import (
    ConfigurationError,
    ExclusiveAccessError,
    IndepError,
    MissingDependencyError,
)
from indep.handle import SharedHandle
from indep.metrics import WiringMetrics
from indep.pool import Pool, PoolEntry
from indep.protocols import Dependency, Dependent
from indep.registry import CapabilitySchema, Implementation, kind_of, wrap

__version__ = "0.1.0"

__all__ = [
    "CapabilitySchema",
    "ComponentDeclaration",
    "ComponentProvider",
    "ConfigurationError",
    "Dependency",
    "Dependent",
    "Deployment",
    "ExclusiveAccessError",
    "Implementation",
    "IndepConfig",
    "IndepError",
    "MissingDependencyError",
    "Pool",
    "PoolEntry",
    "RebindPolicy",
    "SharedHandle",
    "SlotDeclaration",
    "WiringMetrics",
    "bindings",
    "component",
    "declaration_of",
    "kind_of",
    "load_deployment",
    "parse_deployment",
    "require",
    "wrap",
]
