"""Deployment files: capability schema and component declarations in YAML.

A deployment file is read once at startup:

    base: Base
    capabilities: [Trait1, Trait2, Trait3]
    components:
      Impl1:
        provides: [Trait1, Trait2]
      Impl2:
        provides: [Trait2]
        requires:
          t1: Trait1

Every declaration is validated while the file is loaded, so a component
that names an unknown capability fails before anything is registered.
Component bodies are still plain Python classes; Deployment.bind()
attaches a loaded declaration to one of them.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from indep.component import ComponentDeclaration, component
from indep.config import IndepConfig
from indep.errors import ConfigurationError
from indep.registry import CapabilitySchema

logger = logging.getLogger(__name__)


@dataclass
class Deployment:
    """A loaded deployment: one schema plus named component declarations."""
    schema: CapabilitySchema
    components: Dict[str, ComponentDeclaration] = field(default_factory=dict)
    source: Optional[Path] = None

    def declaration(self, name: str) -> ComponentDeclaration:
        """Get the declaration of a component type.

        Raises:
            ConfigurationError: If the deployment does not declare the component
        """
        if name not in self.components:
            raise ConfigurationError(f"Deployment declares no component named {name!r}")
        return self.components[name]

    def bind(self, name: Optional[str] = None):
        """Class decorator applying a declared component's provides/requires.

        Args:
            name: Declared component name (default: the class name)
        """
        def decorator(cls: type) -> type:
            declaration = self.declaration(name or cls.__name__)
            return component(
                self.schema,
                provides=declaration.provides,
                requires={slot.name: slot.kind for slot in declaration.slots},
                name=declaration.identity,
            )(cls)

        return decorator


def _require_section(data: Mapping[str, Any], key: str, kind: type, where: str) -> Any:
    value = data.get(key)
    if not isinstance(value, kind):
        raise ConfigurationError(f"{where}: '{key}' must be a {kind.__name__}")
    return value


def parse_deployment(
    data: Any,
    config: Optional[IndepConfig] = None,
    source: Optional[Path] = None,
) -> Deployment:
    """Build a deployment from already-parsed YAML data.

    Args:
        data: Mapping with base, capabilities and components sections
        config: Container configuration for the schema
        source: File the data came from (for error messages)

    Returns:
        Deployment with every component declaration validated

    Raises:
        ConfigurationError: If a section is malformed or a declaration is invalid
    """
    where = str(source) if source else "deployment"
    if not isinstance(data, Mapping):
        raise ConfigurationError(f"{where}: top level must be a mapping")

    schema = CapabilitySchema(
        base=_require_section(data, "base", str, where),
        kinds=_require_section(data, "capabilities", list, where),
        config=config,
    )

    components = data.get("components") or {}
    if not isinstance(components, Mapping):
        raise ConfigurationError(f"{where}: 'components' must be a mapping")

    deployment = Deployment(schema=schema, source=source)
    for name, body in components.items():
        body = body or {}
        if not isinstance(body, Mapping):
            raise ConfigurationError(f"{where}: component {name!r} must be a mapping")
        provides = body.get("provides", [])
        if isinstance(provides, str):
            provides = [provides]
        deployment.components[str(name)] = schema.declare(
            str(name), provides, body.get("requires")
        )

    logger.debug(
        f"Loaded deployment from {where}: {len(schema.kinds)} capabilities, "
        f"{len(deployment.components)} components"
    )
    return deployment


def load_deployment(path: Union[str, Path], config: Optional[IndepConfig] = None) -> Deployment:
    """Load and validate a deployment file.

    Args:
        path: Path to the YAML file
        config: Container configuration for the schema

    Returns:
        Loaded deployment

    Raises:
        ConfigurationError: If the file cannot be read or parsed, or is invalid
    """
    path = Path(path)
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigurationError(f"Cannot read deployment file {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise ConfigurationError(f"Deployment file {path} is not UTF-8 text: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
    return parse_deployment(data, config=config, source=path)


__all__ = [
    "Deployment",
    "load_deployment",
    "parse_deployment",
]
