"""Capability registry: the closed set of capability kinds.

A deployment declares its capability kinds once, as an ordered list of
names, by building a CapabilitySchema. The schema turns the names into an
Enum; that enum is the whole universe of kinds for every component and
pool wired against the schema. Adding a kind means building a new schema.

Usage:
    schema = CapabilitySchema("Base", ["Trait1", "Trait2", "Trait3"])

    @schema.component(provides=["Trait1"])
    class Impl1:
        ...
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Iterable, Mapping, Optional, Sequence, Tuple, Union

from indep.config import IndepConfig
from indep.errors import ConfigurationError
from indep.handle import SharedHandle

if TYPE_CHECKING:
    from indep.component import ComponentDeclaration

# A kind may be referred to by member, by name, or by the interface class
# whose __name__ is the kind name.
KindRef = Union[Enum, str, type]


# =============================================================================
# IMPLEMENTATION
# =============================================================================

@dataclass(frozen=True)
class Implementation:
    """A capability handle tagged with the kind it is delivered as."""

    kind: Enum
    handle: SharedHandle

    def __str__(self) -> str:
        return self.kind.name


def wrap(handle: SharedHandle, kind: Enum) -> Implementation:
    """Wrap a handle as an implementation of one capability kind."""
    return Implementation(kind=kind, handle=handle)


def kind_of(implementation: Implementation) -> Enum:
    """Return the capability kind an implementation is delivered as."""
    return implementation.kind


# =============================================================================
# SCHEMA
# =============================================================================

def _check_name(name: Any, what: str) -> str:
    if not isinstance(name, str) or not name.isidentifier():
        raise ConfigurationError(f"{what} must be a Python identifier, got {name!r}")
    return name


def _check_kind_name(name: Any) -> str:
    # Enum drops or rejects these instead of turning them into members
    name = _check_name(name, "Capability kind name")
    if name.startswith("_") or name == "mro":
        raise ConfigurationError(f"Capability kind name {name!r} is reserved by Enum")
    return name


class CapabilitySchema:
    """Closed, ordered set of capability kinds for one deployment.

    Attributes:
        base: Name of the lifecycle capability every component exposes
        Kind: Enum holding one member per deliverable capability kind
        config: Container configuration bound to this schema
    """

    def __init__(
        self,
        base: str,
        kinds: Sequence[str],
        config: Optional[IndepConfig] = None,
        name: str = "CapabilityKind",
    ):
        """Declare the schema.

        Args:
            base: Lifecycle capability name (not a deliverable kind)
            kinds: Ordered capability kind names
            config: Container configuration (uses defaults if not provided)
            name: Name of the generated enum

        Raises:
            ConfigurationError: If names are empty, duplicated or not identifiers
        """
        self.base = _check_name(base, "Base capability name")
        names = [_check_kind_name(k) for k in kinds]
        if not names:
            raise ConfigurationError("A capability schema needs at least one kind")

        seen = set()
        for kind_name in names:
            if kind_name in seen:
                raise ConfigurationError(f"Duplicate capability kind: {kind_name}")
            if kind_name == base:
                raise ConfigurationError(
                    f"{kind_name} is the base capability and cannot also be a kind"
                )
            seen.add(kind_name)

        enum_name = _check_name(name, "Schema name")
        try:
            self.Kind = Enum(enum_name, [(k, k) for k in names])
        except ValueError as e:
            raise ConfigurationError(f"Cannot build capability kinds {names}: {e}") from e
        self.config = config or IndepConfig.default()

    @property
    def kinds(self) -> Tuple[Enum, ...]:
        """All kinds, in declaration order."""
        return tuple(self.Kind)

    @property
    def kind_names(self) -> Tuple[str, ...]:
        return tuple(k.name for k in self.Kind)

    def __contains__(self, kind: object) -> bool:
        try:
            self.resolve(kind)  # type: ignore[arg-type]
        except ConfigurationError:
            return False
        return True

    def resolve(self, kind: KindRef) -> Enum:
        """Resolve a kind reference to a member of this schema.

        Args:
            kind: Enum member, kind name, or interface class

        Returns:
            The matching Kind member

        Raises:
            ConfigurationError: If the kind is not part of this schema
        """
        if isinstance(kind, self.Kind):
            return kind
        if isinstance(kind, Enum):
            # Member of some other schema's enum
            raise ConfigurationError(
                f"{kind!r} belongs to a different capability schema"
            )
        key = kind.__name__ if isinstance(kind, type) else kind
        try:
            return self.Kind[key]
        except (KeyError, TypeError):
            raise ConfigurationError(
                f"Unknown capability kind {key!r}; schema declares {', '.join(self.kind_names)}"
            ) from None

    def wrap(self, handle: SharedHandle, kind: KindRef) -> Implementation:
        """Resolve a kind reference and wrap the handle as that kind."""
        return wrap(handle, self.resolve(kind))

    def declare(
        self,
        identity: str,
        provides: Iterable[KindRef],
        requires: Optional[Mapping[str, KindRef]] = None,
    ) -> "ComponentDeclaration":
        """Validate a component declaration against this schema.

        See indep.component.ComponentDeclaration for the rules.
        """
        from indep.component import ComponentDeclaration
        return ComponentDeclaration.build(self, identity, provides, requires)

    def component(
        self,
        provides: Iterable[KindRef],
        requires: Optional[Mapping[str, KindRef]] = None,
        name: Optional[str] = None,
    ):
        """Class decorator generating provider/consumer glue for a component.

        Args:
            provides: Capability kinds the component exposes
            requires: Slot name -> capability kind
            name: Identity string (default: class name)
        """
        from indep.component import component
        return component(self, provides=provides, requires=requires, name=name)

    def describe(self) -> Dict[str, Any]:
        """Return the schema as plain data."""
        return {"base": self.base, "capabilities": list(self.kind_names)}

    def __repr__(self) -> str:
        return f"CapabilitySchema(base={self.base!r}, kinds={list(self.kind_names)!r})"


__all__ = [
    "CapabilitySchema",
    "Implementation",
    "KindRef",
    "wrap",
    "kind_of",
]
