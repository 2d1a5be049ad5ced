"""Provider and consumer contracts.

These are typing.Protocol classes. Component types either get them
generated by the indep.component decorator, or implement them by hand.
"""

from typing import Any, Collection, Protocol, Sequence, runtime_checkable

from indep.handle import SharedHandle
from indep.registry import Implementation


@runtime_checkable
class Dependent(Protocol):
    """Receiving side of a component (the consumer view).

    accept() is the only mutating entry point. With no tags it binds the
    handle into every slot of the matching kind; with tags it binds only
    into matching slots whose name is one of the tags. Nothing matching
    is a no-op.
    """

    def accept(self, capability: Implementation, tags: Collection[str]) -> None: ...


@runtime_checkable
class Dependency(Protocol):
    """Providing side of a component, as registered into a Pool."""

    def capabilities(self) -> Sequence[Implementation]: ...
    def as_consumer(self) -> SharedHandle[Dependent]: ...
    def as_base(self) -> SharedHandle[Any]: ...
    def identity(self) -> str: ...


__all__ = [
    "Dependency",
    "Dependent",
]
