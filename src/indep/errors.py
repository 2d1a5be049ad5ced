"""Error types raised by the wiring container.

Three failure classes exist:
- ConfigurationError: a schema or component declaration is invalid.
  Raised while the component type (or deployment file) is being defined,
  before any pool interaction is possible.
- ExclusiveAccessError: a conflicting borrow of a shared handle.
- MissingDependencyError: application code asked for a slot that was
  never bound. The pool itself never reports unresolved slots.
"""


class IndepError(Exception):
    """Base class for all container errors."""


class ConfigurationError(IndepError, ValueError):
    """Invalid capability schema or component declaration."""


class ExclusiveAccessError(IndepError, RuntimeError):
    """A shared handle was borrowed in a way that conflicts with a live borrow."""


class MissingDependencyError(IndepError, LookupError):
    """A required slot was read before anything was bound into it."""

    def __init__(self, component: str, slot: str):
        self.component = component
        self.slot = slot
        super().__init__(f"{component}.{slot} is not bound")


__all__ = [
    "IndepError",
    "ConfigurationError",
    "ExclusiveAccessError",
    "MissingDependencyError",
]
