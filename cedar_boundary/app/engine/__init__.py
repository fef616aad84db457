"""
Policy engine adapters.

The boundary never evaluates policies itself; it talks to an engine through
the ``PolicyEngine`` interface:

- base: the abstract capability set the boundary consumes.
- structured: JSON-format parsers (identifiers, contexts, entities, schemas)
  shared by adapters.
- cedar: the ``cedarpy`` adapter, used by default.

Adapters are looked up by name so the engine can be switched with
configuration. Importing this package does not import any engine library.
"""

from importlib import import_module
from typing import Dict

from shared.errors import EngineUnavailable
from .base import PolicyEngine
from .structured import StructuredEngine

ENGINES: Dict[str, str] = {
    "cedarpy": "cedar_boundary.app.engine.cedar:CedarpyEngine",
}


def create_engine(name: str) -> PolicyEngine:
    """Instantiate the engine adapter registered under ``name``."""
    if name not in ENGINES:
        raise EngineUnavailable(name, "unknown engine", details={"known": sorted(ENGINES)})

    module_name, class_name = ENGINES[name].split(":")
    try:
        module = import_module(module_name)
    except ImportError as e:
        raise EngineUnavailable(name, f"engine library is not installed ({e})") from e
    return getattr(module, class_name)()


__all__ = ["ENGINES", "PolicyEngine", "StructuredEngine", "create_engine"]
