"""Autoloader: registration, one-time startup and the lazy-load hook body.

An ``Autoloader`` owns the two registration tables, the modules root and the
started flag. It is passed to consumers explicitly; ``get_default_autoloader``
provides the process-wide instance for code that wants one.

Lifecycle: NotStarted -> Started (one-way). ``start()`` installs the
catch-all namespace mapping for the modules root and appends an
``AutoloadFinder`` to the meta path, exactly once.
"""

from __future__ import annotations

import logging
import sys
import threading
from collections.abc import Sequence
from pathlib import Path

from ..diagnostics import Diagnostic
from ..diagnostics import DiagnosticKind
from ..diagnostics import DiagnosticSink
from ..diagnostics import DirectoryNotFoundError
from ..diagnostics import LoggingDiagnosticSink
from .finder import AutoloadFinder
from .loading import LoadCapability
from .loading import SourceUnitLoader
from .registry import DEFAULT_EXTENSIONS
from .registry import ExplicitRegistry
from .registry import NamespaceRegistry
from .registry import canonical_directory
from .resolver import Resolver
from .resolver import strip_leading_separator
from .trace import format_call_trace

logger = logging.getLogger(__name__)

# Two levels above this package: the directory holding the nsloader package
DEFAULT_MODULES_ROOT = Path(__file__).parent / ".." / ".."


class Autoloader:
    """Resolve symbolic names to files and load them on first reference."""

    def __init__(
        self,
        modules_root: str | Path | None = None,
        *,
        extensions: Sequence[str] = DEFAULT_EXTENSIONS,
        loader: LoadCapability | None = None,
        sink: DiagnosticSink | None = None,
        meta_path: list | None = None,
        prefer_longest_prefix: bool = False,
        warn_on_missing_imports: bool = False,
    ):
        """Initialize autoloader.

        Args:
            modules_root: Base for relative class paths and the catch-all mapping.
                          If None, computed lazily from the installation location.
            extensions: File extensions probed in order for namespace mappings
            loader: Load primitive (default: SourceUnitLoader)
            sink: Diagnostic sink (default: LoggingDiagnosticSink)
            meta_path: Finder list the import hook is installed into (default: sys.meta_path)
            prefer_longest_prefix: Probe the most specific namespace prefixes first
                                   instead of registration order
            warn_on_missing_imports: Report imports nothing resolves as NAME_NOT_FOUND
        """
        self.loader: LoadCapability = loader if loader is not None else SourceUnitLoader()
        self.sink: DiagnosticSink = sink if sink is not None else LoggingDiagnosticSink()
        self.meta_path = meta_path if meta_path is not None else sys.meta_path
        self.warn_on_missing_imports = warn_on_missing_imports

        self._modules_root: Path | None = None
        self._root_lock = threading.Lock()
        self._started = False
        self._start_lock = threading.Lock()
        self.finder: AutoloadFinder | None = None

        self.explicit = ExplicitRegistry(lambda: self.modules_root)
        self.namespaces = NamespaceRegistry(extensions, prefer_longest_prefix=prefer_longest_prefix)
        self.resolver = Resolver(self.explicit, self.namespaces)

        if modules_root is not None:
            self.set_modules_root(modules_root)

    # ===== MODULES ROOT =====

    @property
    def modules_root(self) -> Path | None:
        """Modules root directory, computed on first use if never set."""
        if self._modules_root is None:
            self.set_modules_root(DEFAULT_MODULES_ROOT)
        return self._modules_root

    def set_modules_root(self, directory: str | Path) -> bool:
        """Set the modules root; keeps the previous value if directory is missing."""
        try:
            real = canonical_directory(directory)
        except DirectoryNotFoundError as e:
            self._report(
                DiagnosticKind.DIRECTORY_NOT_FOUND,
                f"Autoloader can not set modules directory: {e}",
                path=str(directory),
            )
            return False
        with self._root_lock:
            self._modules_root = real
        logger.debug(f"[autoload:root] {real}")
        return True

    # ===== REGISTRATION =====

    def register_class(self, name: str, path: str | Path) -> None:
        """Pin name to a file. Relative paths are taken from the modules root."""
        self.explicit.register(strip_leading_separator(name), path)

    def register_namespace(self, prefix: str, directory: str | Path) -> bool:
        """Map a namespace prefix ('' for catch-all) to a directory.

        Returns:
            False if the directory does not exist (nothing is registered)
        """
        try:
            return self.namespaces.register(prefix, directory)
        except DirectoryNotFoundError as e:
            self._report(
                DiagnosticKind.DIRECTORY_NOT_FOUND,
                f"Namespace {prefix!r} was not registered: {e}",
                name=prefix,
                path=str(directory),
            )
            return False

    # ===== RESOLUTION =====

    def resolve(self, symbolic_name: str) -> Path | None:
        return self.resolver.resolve(symbolic_name)

    def resolve_with_layer(self, symbolic_name: str) -> tuple[Path | None, str | None]:
        return self.resolver.resolve_with_layer(symbolic_name)

    # ===== STARTUP =====

    @property
    def started(self) -> bool:
        return self._started

    def start(self) -> bool:
        """Install the catch-all mapping and the import hook, once.

        Returns:
            True for the call that performed startup, False if already started
        """
        with self._start_lock:
            if self._started:
                return False
            self._started = True

            root = self.modules_root
            if root is not None:
                self.register_namespace("", root)

            self.finder = AutoloadFinder(self)
            self.meta_path.append(self.finder)
            logger.debug(f"[autoload:start] root={root} finder installed")
            return True

    def stop(self) -> None:
        """Remove the import hook. The started flag stays set."""
        if self.finder is not None and self.finder in self.meta_path:
            self.meta_path.remove(self.finder)

    # ===== LAZY-LOAD HOOK =====

    def module_name(self, symbolic_name: str) -> str:
        """Name a unit is loaded under: the registered spelling for explicit entries."""
        name = strip_leading_separator(symbolic_name)
        return self.explicit.registered_name(name) or name

    def on_reference(self, symbolic_name: str, *, suppress_not_found_diagnostic: bool = False) -> bool:
        """Resolve and load the file for a referenced, not yet declared name.

        Args:
            symbolic_name: Dotted name, with or without a leading separator
            suppress_not_found_diagnostic: True for existence probes, which are
                                           expected to fail silently

        Returns:
            True if a file was found, loaded and declared the name
        """
        name = self.module_name(symbolic_name)
        path = self.resolver.resolve(name)

        if path is None:
            if not suppress_not_found_diagnostic:
                self.report_not_found(name)
            return False

        # Explicit registrations are not checked until load time
        if not path.is_file():
            logger.debug(f"[autoload:load] {name} -> missing file {path}")
            if not suppress_not_found_diagnostic:
                self.report_not_found(name, path)
            return False

        self.loader.load(path, name)
        if self.loader.declared(name) is None:
            self.report_mismatch(name, path)
            return False
        return True

    def class_exists(self, symbolic_name: str, autoload: bool = True) -> bool:
        """Existence probe: never reports NAME_NOT_FOUND."""
        name = self.module_name(symbolic_name)
        if self.loader.declared(name) is not None:
            return True
        if not autoload:
            return False
        return self.on_reference(name, suppress_not_found_diagnostic=True)

    def load_class(self, symbolic_name: str) -> type | None:
        """Return the class for a name, loading its file if needed."""
        name = self.module_name(symbolic_name)
        declared = self.loader.declared(name)
        if declared is not None:
            return declared
        if not self.on_reference(name):
            return None
        return self.loader.declared(name)

    # ===== DIAGNOSTICS =====

    def report_not_found(self, name: str, path: Path | None = None) -> None:
        message = f"Class {name} was not found"
        if path is not None:
            message += f": registered file does not exist: {path}"
        self._report(
            DiagnosticKind.NAME_NOT_FOUND,
            message,
            name=name,
            path=str(path) if path is not None else None,
            trace=format_call_trace(skip=1),
        )

    def report_mismatch(self, name: str, path: Path) -> None:
        self._report(
            DiagnosticKind.DECLARED_NAME_MISMATCH,
            f"Class {name} was not declared in loaded file: {path}",
            name=name,
            path=str(path),
            trace=format_call_trace(skip=1),
        )

    def _report(
        self,
        kind: DiagnosticKind,
        message: str,
        *,
        name: str | None = None,
        path: str | None = None,
        trace: str | None = None,
    ) -> None:
        self.sink.emit(Diagnostic(kind=kind, name=name, message=message, path=path, trace=trace))

    def __repr__(self) -> str:
        state = "started" if self._started else "not started"
        return f"Autoloader(root={self._modules_root}, {self.resolver!r}, {state})"


# Process-wide instance
_default: Autoloader | None = None
_default_lock = threading.Lock()


def get_default_autoloader() -> Autoloader:
    """Get the process-wide autoloader, creating it on first use."""
    global _default
    with _default_lock:
        if _default is None:
            _default = Autoloader()
        return _default


def reset_default_autoloader() -> None:
    """Drop the process-wide autoloader, removing its import hook."""
    global _default
    with _default_lock:
        if _default is not None:
            _default.stop()
        _default = None
