"""Load primitive: execute a resolved file as a module.

The autoloader never executes files itself. It calls a ``LoadCapability``,
which makes the file's declarations available and returns the type a
symbolic name now refers to, if any. ``SourceUnitLoader`` is the default one,
backed by importlib and ``sys.modules``.
"""

from __future__ import annotations

import importlib.util
import logging
import sys
from importlib.machinery import SourceFileLoader
from importlib.machinery import SourcelessFileLoader
from pathlib import Path
from types import ModuleType
from typing import Protocol

from .registry import NAMESPACE_SEPARATOR

logger = logging.getLogger(__name__)


class LoadCapability(Protocol):
    def load(self, path: Path, name: str) -> bool: ...

    def declared(self, name: str) -> type | None: ...


def declared_attribute(name: str) -> str:
    """Attribute a unit must define: the final segment of its name."""
    return name.rsplit(NAMESPACE_SEPARATOR, 1)[-1]


def file_loader_for(name: str, path: Path) -> SourceFileLoader | SourcelessFileLoader:
    if path.suffix == ".pyc":
        return SourcelessFileLoader(name, str(path))
    return SourceFileLoader(name, str(path))


def find_declared(module: ModuleType | None, name: str) -> type | None:
    """Return the class (or ABC/Protocol contract) the module declares for name.

    Class names match case-insensitively, like symbolic names do.
    """
    if module is None:
        return None
    attribute = declared_attribute(name)
    candidate = getattr(module, attribute, None)
    if isinstance(candidate, type):
        return candidate
    lowered = attribute.lower()
    for key, value in vars(module).items():
        if key.lower() == lowered and isinstance(value, type):
            return value
    return None


class SourceUnitLoader:
    """Execute a file as module ``name`` and register it in sys.modules."""

    def load(self, path: Path, name: str) -> bool:
        """Load path as module name, once.

        A module already registered under name from the same file is reused.
        Exceptions raised while executing the file propagate; the partially
        initialised module is removed from sys.modules first.
        """
        path = Path(path)
        existing = sys.modules.get(name)
        if existing is not None and self._same_file(existing, path):
            logger.debug(f"[autoload:load] {name} already loaded from {path}")
            return True

        loader = file_loader_for(name, path)
        spec = importlib.util.spec_from_file_location(name, str(path), loader=loader)
        if spec is None:
            logger.debug(f"[autoload:load] no module spec for {path}")
            return False

        module = importlib.util.module_from_spec(spec)
        sys.modules[name] = module
        try:
            loader.exec_module(module)
        except BaseException:
            sys.modules.pop(name, None)
            raise

        logger.debug(f"[autoload:load] {name} <- {path}")
        return True

    def declared(self, name: str) -> type | None:
        return find_declared(sys.modules.get(name), name)

    def declares(self, name: str) -> bool:
        return self.declared(name) is not None

    @staticmethod
    def _same_file(module: ModuleType, path: Path) -> bool:
        origin = getattr(module, "__file__", None)
        if not origin:
            return False
        try:
            return Path(origin).resolve() == path.resolve()
        except OSError:
            return False

    def __repr__(self) -> str:
        return "SourceUnitLoader(importlib)"
