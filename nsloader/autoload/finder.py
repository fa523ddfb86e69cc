"""Import hook: route unresolved imports through the autoloader.

The finder sits at the end of ``sys.meta_path``, so it is only consulted
for names no other finder could locate:

- a name resolving to a file is loaded from that file, then checked for its
  declared class
- a name resolving to a directory (or owning registrations or prefixes) becomes
  an empty package, so its children come back through this finder
- anything else is left to the import system, which raises ImportError
"""

from __future__ import annotations

import importlib.abc
import importlib.util
import logging
from importlib.machinery import ModuleSpec
from pathlib import Path
from types import ModuleType
from typing import TYPE_CHECKING

from .loading import file_loader_for
from .loading import find_declared

if TYPE_CHECKING:
    from .autoloader import Autoloader

logger = logging.getLogger(__name__)


class AutoloadModuleLoader(importlib.abc.Loader):
    """Execute a resolved file, then verify it declared the expected class."""

    def __init__(self, autoloader: Autoloader, name: str, path: Path):
        self.autoloader = autoloader
        self.name = name
        self.path = path
        self._file_loader = file_loader_for(name, path)

    def create_module(self, spec: ModuleSpec) -> ModuleType | None:
        return None

    def exec_module(self, module: ModuleType) -> None:
        self._file_loader.exec_module(module)
        # Import statements cannot report failure without raising, so a
        # mismatch is reported and the module is still returned.
        if find_declared(module, self.name) is None:
            self.autoloader.report_mismatch(self.name, self.path)

    def get_filename(self, fullname: str) -> str:
        return str(self.path)


class NamespacePackageLoader(importlib.abc.Loader):
    """Loader for the empty packages standing in for namespace directories."""

    def create_module(self, spec: ModuleSpec) -> ModuleType | None:
        return None

    def exec_module(self, module: ModuleType) -> None:
        pass


class AutoloadFinder(importlib.abc.MetaPathFinder):
    """Meta path finder backed by an Autoloader."""

    def __init__(self, autoloader: Autoloader):
        self.autoloader = autoloader

    def find_spec(self, fullname: str, path=None, target=None) -> ModuleSpec | None:
        resolved = self.autoloader.resolve(fullname)
        # An explicit registration may point at a file that does not exist yet
        if resolved is not None and resolved.is_file():
            loader = AutoloadModuleLoader(self.autoloader, fullname, resolved)
            return importlib.util.spec_from_file_location(fullname, str(resolved), loader=loader)

        if (
            self.autoloader.explicit.is_namespace(fullname)
            or self.autoloader.namespaces.is_namespace(fullname)
            or self.autoloader.namespaces.resolve_directory(fullname)
        ):
            logger.debug(f"[autoload:import] {fullname} -> namespace package")
            # No search locations: submodules must come back through this finder
            return ModuleSpec(fullname, NamespacePackageLoader(), is_package=True)

        if self.autoloader.warn_on_missing_imports:
            self.autoloader.report_not_found(fullname)
        return None

    def __repr__(self) -> str:
        return f"AutoloadFinder({self.autoloader!r})"
