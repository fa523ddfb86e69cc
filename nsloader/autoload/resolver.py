"""Symbolic name resolution.

Resolution order (first match wins):
1. Explicit registration (case-insensitive exact name)
2. Namespace mappings, probing each configured extension
"""

import logging
from pathlib import Path

from .registry import NAMESPACE_SEPARATOR
from .registry import ExplicitRegistry
from .registry import NamespaceRegistry

logger = logging.getLogger(__name__)


def strip_leading_separator(name: str) -> str:
    """'.Acme.Foo' and 'Acme.Foo' name the same unit."""
    if name.startswith(NAMESPACE_SEPARATOR):
        return name[1:]
    return name


class Resolver:
    """Two-layer resolver: explicit overrides, then namespace conventions."""

    def __init__(self, explicit: ExplicitRegistry, namespaces: NamespaceRegistry):
        self.explicit = explicit
        self.namespaces = namespaces

    def resolve(self, symbolic_name: str) -> Path | None:
        path, _layer = self.resolve_with_layer(symbolic_name)
        return path

    def resolve_with_layer(self, symbolic_name: str) -> tuple[Path | None, str | None]:
        """Resolve a name and report which layer resolved it.

        Returns:
            Tuple of (path, layer_name); layer_name is "explicit" or
            "namespace", both are None when nothing was found
        """
        name = strip_leading_separator(symbolic_name)
        if not name:
            return None, None

        if path := self.explicit.lookup(name):
            logger.debug(f"[autoload:resolve] {name} -> explicit ({path})")
            return path, "explicit"

        if path := self.namespaces.resolve_candidates(name):
            logger.debug(f"[autoload:resolve] {name} -> namespace ({path})")
            return path, "namespace"

        logger.debug(f"[autoload:resolve] {name} -> not found")
        return None, None

    def __repr__(self) -> str:
        return f"Resolver(explicit={len(self.explicit)}, namespaces={len(self.namespaces)})"
