"""Declarative provider/consumer glue for component types.

A component type states which capability kinds it provides and which
named slots it requires; the decorator validates that declaration
against the schema and generates the rest:

    @schema.component(provides=["Trait3"], requires={"t1_1": "Trait1", "t2_1": "Trait2"})
    class Impl3:
        def do3(self):
            with require(self, "t1_1").borrow() as t1:
                t1.do1()

    pool.register(Impl3.new_provider())

Generated pieces:
- a class attribute per slot, defaulting to None (unbound)
- accept(capability, tags): the consumer contract
- new_provider(*args, **kwargs): builds a ComponentProvider around a new instance

Every declaration error is raised when the class statement runs, before
the component type can be registered anywhere.
"""

import keyword
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Collection, Dict, Iterable, Mapping, Optional, Tuple

from indep.config import RebindPolicy
from indep.errors import ConfigurationError, MissingDependencyError
from indep.handle import SharedHandle
from indep.registry import CapabilitySchema, Implementation, KindRef, wrap

logger = logging.getLogger(__name__)

DECLARATION_ATTR = "__indep_component__"

# Names the decorator attaches to every component class
RESERVED_SLOT_NAMES = frozenset({"accept", "new_provider"})


# =============================================================================
# DECLARATIONS
# =============================================================================

@dataclass(frozen=True)
class SlotDeclaration:
    """A named requirement for exactly one capability kind."""
    name: str
    kind: Enum


@dataclass(frozen=True)
class ComponentDeclaration:
    """Validated declaration of a component type.

    Attributes:
        identity: Display name used in diagnostics
        provides: Exposed capability kinds, in declaration order
        slots: Requirement slots, in declaration order
        schema: Schema the declaration was validated against
    """
    identity: str
    provides: Tuple[Enum, ...]
    slots: Tuple[SlotDeclaration, ...] = ()
    schema: Optional[CapabilitySchema] = field(default=None, compare=False, repr=False)

    @classmethod
    def build(
        cls,
        schema: CapabilitySchema,
        identity: str,
        provides: Iterable[KindRef],
        requires: Optional[Mapping[str, KindRef]] = None,
    ) -> "ComponentDeclaration":
        """Validate a declaration against a schema.

        Args:
            schema: Capability schema to validate against
            identity: Component identity string
            provides: Capability kinds the component exposes (at least one)
            requires: Slot name -> capability kind

        Returns:
            The validated declaration

        Raises:
            ConfigurationError: If any kind is unknown, nothing is provided,
                a kind is provided twice, or a slot name is not an identifier
        """
        if not isinstance(identity, str) or not identity.strip():
            raise ConfigurationError("Component identity must be a non-empty string")
        if isinstance(provides, (str, Enum, type)):
            provides = [provides]

        provided = []
        for ref in provides:
            kind = schema.resolve(ref)
            if kind in provided:
                raise ConfigurationError(f"{identity} provides {kind.name} twice")
            provided.append(kind)
        if not provided:
            raise ConfigurationError(f"{identity} must provide at least one capability")

        if requires is None:
            requires = {}
        if not isinstance(requires, Mapping):
            raise ConfigurationError(
                f"{identity} requirements must map slot names to capability kinds"
            )

        slots = []
        for slot_name, ref in requires.items():
            if (
                not isinstance(slot_name, str)
                or not slot_name.isidentifier()
                or keyword.iskeyword(slot_name)
                or slot_name.startswith("_")
            ):
                raise ConfigurationError(f"{identity}: invalid slot name {slot_name!r}")
            if slot_name in RESERVED_SLOT_NAMES:
                raise ConfigurationError(
                    f"{identity}: slot name {slot_name!r} is reserved for component glue"
                )
            slots.append(SlotDeclaration(name=slot_name, kind=schema.resolve(ref)))

        return cls(
            identity=identity,
            provides=tuple(provided),
            slots=tuple(slots),
            schema=schema,
        )

    @property
    def slot_names(self) -> Tuple[str, ...]:
        return tuple(slot.name for slot in self.slots)

    def slots_for(self, kind: Enum) -> Tuple[SlotDeclaration, ...]:
        """Return the slots that accept a capability kind."""
        return tuple(slot for slot in self.slots if slot.kind == kind)

    def get_slot(self, name: str) -> SlotDeclaration:
        """Look up a slot by name.

        Raises:
            ConfigurationError: If the component declares no such slot
        """
        for slot in self.slots:
            if slot.name == name:
                return slot
        raise ConfigurationError(f"{self.identity} declares no slot named {name!r}")


def declaration_of(obj: Any) -> ComponentDeclaration:
    """Return the declaration attached to a component class or instance.

    Raises:
        TypeError: If obj was not declared as a component
    """
    declaration = getattr(obj, DECLARATION_ATTR, None)
    if not isinstance(declaration, ComponentDeclaration):
        name = obj.__name__ if isinstance(obj, type) else type(obj).__name__
        raise TypeError(
            f"{name} is not a declared component; decorate it with CapabilitySchema.component"
        )
    return declaration


# =============================================================================
# CONSUMER GLUE
# =============================================================================

def _accept(self, capability: Implementation, tags: Collection[str]) -> None:
    declaration = declaration_of(self)
    for slot in declaration.slots_for(capability.kind):
        if tags and slot.name not in tags:
            continue
        _bind(self, declaration, slot, capability)


def _bind(
    instance: Any,
    declaration: ComponentDeclaration,
    slot: SlotDeclaration,
    capability: Implementation,
) -> None:
    current = getattr(instance, slot.name, None)
    policy = declaration.schema.config.rebind_policy if declaration.schema else RebindPolicy.OVERWRITE
    if policy == RebindPolicy.WARN and current is not None and current is not capability.handle:
        logger.warning(
            f"{declaration.identity}.{slot.name} rebound from {current.label} "
            f"to {capability.handle.label}"
        )
    setattr(instance, slot.name, capability.handle)
    logger.debug(f"{capability} is set to {declaration.identity} as {slot.name}")


def _new_provider(cls, *args: Any, **kwargs: Any) -> "ComponentProvider":
    return ComponentProvider(cls(*args, **kwargs))


def component(
    schema: CapabilitySchema,
    provides: Iterable[KindRef],
    requires: Optional[Mapping[str, KindRef]] = None,
    name: Optional[str] = None,
):
    """Class decorator turning a plain class into a wireable component.

    Args:
        schema: Capability schema the component is declared against
        provides: Capability kinds the component exposes
        requires: Slot name -> capability kind
        name: Identity string (default: class name)

    Raises:
        ConfigurationError: If the declaration is invalid, or a slot would
            shadow an existing attribute of the class
    """
    def decorator(cls: type) -> type:
        declaration = ComponentDeclaration.build(
            schema, name or cls.__name__, provides, requires
        )
        inherited = getattr(cls, DECLARATION_ATTR, None)
        inherited_slots = inherited.slot_names if inherited is not None else ()
        for slot in declaration.slots:
            if hasattr(cls, slot.name) and slot.name not in inherited_slots:
                raise ConfigurationError(
                    f"{cls.__name__}.{slot.name} would shadow an existing attribute"
                )
            setattr(cls, slot.name, None)

        setattr(cls, DECLARATION_ATTR, declaration)
        # Hand-written consumer glue wins over the generated one
        if "accept" not in cls.__dict__:
            cls.accept = _accept
        if "new_provider" not in cls.__dict__:
            cls.new_provider = classmethod(_new_provider)
        return cls

    return decorator


# =============================================================================
# PROVIDER GLUE
# =============================================================================

class ComponentProvider:
    """Provider wrapper around one declared component instance.

    All exposed implementations, the consumer view and the base view share
    a single SharedHandle to the instance.
    """

    def __init__(self, instance: Any):
        """Wrap a component instance.

        Args:
            instance: Instance of a class decorated with CapabilitySchema.component

        Raises:
            TypeError: If the instance's class was not declared as a component
        """
        self._declaration = declaration_of(instance)
        self._handle = SharedHandle(instance, label=self._declaration.identity)
        self._implementations = tuple(
            wrap(self._handle, kind) for kind in self._declaration.provides
        )

    @property
    def declaration(self) -> ComponentDeclaration:
        return self._declaration

    @property
    def handle(self) -> SharedHandle:
        return self._handle

    def capabilities(self) -> Tuple[Implementation, ...]:
        return self._implementations

    def as_consumer(self) -> SharedHandle:
        return self._handle

    def as_base(self) -> SharedHandle:
        return self._handle

    def identity(self) -> str:
        return self._declaration.identity

    def __repr__(self) -> str:
        kinds = ", ".join(str(imp) for imp in self._implementations)
        return f"ComponentProvider({self.identity()}: {kinds})"


# =============================================================================
# SLOT ACCESS
# =============================================================================

def bindings(instance: Any) -> Dict[str, Optional[SharedHandle]]:
    """Return the current handle (or None) of every declared slot."""
    declaration = declaration_of(instance)
    return {slot.name: getattr(instance, slot.name, None) for slot in declaration.slots}


def require(instance: Any, slot_name: str) -> SharedHandle:
    """Return the handle bound into a slot.

    Args:
        instance: Component instance
        slot_name: Declared slot name

    Returns:
        The bound handle

    Raises:
        ConfigurationError: If the component declares no such slot
        MissingDependencyError: If nothing was ever bound into the slot
    """
    declaration = declaration_of(instance)
    declaration.get_slot(slot_name)
    handle = getattr(instance, slot_name, None)
    if handle is None:
        raise MissingDependencyError(declaration.identity, slot_name)
    return handle


__all__ = [
    "ComponentDeclaration",
    "ComponentProvider",
    "SlotDeclaration",
    "bindings",
    "component",
    "declaration_of",
    "require",
]
