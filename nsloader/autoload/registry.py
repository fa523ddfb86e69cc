"""Name-to-path registration tables.

Two tables drive resolution:
- ExplicitRegistry: lower-cased symbolic name -> file path (per-name overrides)
- NamespaceRegistry: namespace prefix -> base directory (convention-based discovery)

Both tables only grow or overwrite entries; nothing is ever removed.
"""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Callable
from collections.abc import Iterator
from collections.abc import Sequence
from pathlib import Path

from ..diagnostics import DirectoryNotFoundError

logger = logging.getLogger(__name__)

NAMESPACE_SEPARATOR = "."
DEFAULT_EXTENSIONS = (".py", ".pyw", ".pyc")


def canonical_directory(path: str | Path) -> Path:
    """Resolve path to an existing real directory.

    Raises:
        DirectoryNotFoundError: path does not exist or is not a directory
    """
    try:
        real = Path(path).expanduser().resolve(strict=True)
    except (OSError, RuntimeError):
        raise DirectoryNotFoundError(str(path))
    if not real.is_dir():
        raise DirectoryNotFoundError(str(path), f"Not a directory: {path}")
    return real


def normalize_prefix(prefix: str) -> str:
    """Normalize a namespace prefix to end with exactly one separator.

    The empty prefix is the catch-all mapping and is kept as-is, as is a
    prefix made only of separators.
    """
    trimmed = prefix.strip(NAMESPACE_SEPARATOR)
    if not trimmed:
        return ""
    return trimmed + NAMESPACE_SEPARATOR


def split_name(symbolic_name: str) -> tuple[str, str]:
    """Split on the last separator into (namespace_part, tail_part).

    namespace_part keeps its trailing separator. Underscores in tail_part
    become directory boundaries; underscores in namespace_part are kept.
    """
    pos = symbolic_name.rfind(NAMESPACE_SEPARATOR)
    if pos == -1:
        namespace_part, tail = "", symbolic_name
    else:
        namespace_part, tail = symbolic_name[: pos + 1], symbolic_name[pos + 1 :]
    return namespace_part, tail.replace("_", "/")


class ExplicitRegistry:
    """Case-insensitive symbolic name -> file path overrides."""

    def __init__(self, modules_root: Callable[[], Path | None]):
        """Initialize registry.

        Args:
            modules_root: Callable returning the base for relative paths
        """
        self._modules_root = modules_root
        self._classes: dict[str, Path] = {}
        self._spellings: dict[str, str] = {}
        self._lock = threading.RLock()

    def register(self, name: str, path: str | Path) -> None:
        """Register name -> path, overwriting any previous entry.

        The path is not checked for existence; a missing file surfaces at
        load time. A relative path is joined onto the modules root with
        pathlib, so redundant separators and "." segments are collapsed.
        """
        path = Path(path)
        if not path.is_absolute():
            root = self._modules_root()
            if root is not None:
                path = root / path
        with self._lock:
            self._classes[name.lower()] = path
            self._spellings[name.lower()] = name
        logger.debug(f"[autoload:register] class {name} -> {path}")

    def lookup(self, name: str) -> Path | None:
        with self._lock:
            return self._classes.get(name.lower())

    def registered_name(self, name: str) -> str | None:
        """Spelling name was registered with, matched case-insensitively."""
        with self._lock:
            return self._spellings.get(name.lower())

    def is_namespace(self, name: str) -> bool:
        """True if some registered name lives below name ('acme' for 'acme.foo')."""
        prefix = name.lower() + NAMESPACE_SEPARATOR
        with self._lock:
            return any(key.startswith(prefix) for key in self._classes)

    def items(self) -> list[tuple[str, Path]]:
        with self._lock:
            return list(self._classes.items())

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        with self._lock:
            return name.lower() in self._classes

    def __len__(self) -> int:
        with self._lock:
            return len(self._classes)


class NamespaceRegistry:
    """Namespace prefix -> base directory mappings with multi-extension probing.

    Matching follows registration order: every mapping whose prefix matches
    is probed and the first existing file wins, even when a longer prefix was
    registered later. ``prefer_longest_prefix=True`` probes the most specific
    matching prefixes first instead.
    """

    def __init__(self, extensions: Sequence[str] = DEFAULT_EXTENSIONS, *, prefer_longest_prefix: bool = False):
        if not extensions:
            raise ValueError("At least one file extension is required")
        self.extensions = tuple(extensions)
        self.prefer_longest_prefix = prefer_longest_prefix
        self._dirs: dict[str, str] = {}
        self._lock = threading.RLock()

    def register(self, prefix: str, directory: str | Path) -> bool:
        """Associate a namespace prefix with a directory.

        With prefix 'Acme.Tools.' -> '/srv/acme', 'Acme.Tools.Sub.Class_Name'
        is looked up as /srv/acme/Sub/Class/Name.py (then .pyw, .pyc).

        Returns:
            True once the mapping is stored

        Raises:
            DirectoryNotFoundError: directory does not exist; the table is left unchanged
        """
        real = canonical_directory(directory)
        prefix = normalize_prefix(prefix)
        with self._lock:
            self._dirs[prefix] = os.path.join(str(real), "")
        logger.debug(f"[autoload:register] namespace {prefix!r} -> {real}")
        return True

    def items(self) -> list[tuple[str, str]]:
        with self._lock:
            return list(self._dirs.items())

    def __len__(self) -> int:
        with self._lock:
            return len(self._dirs)

    def is_namespace(self, name: str) -> bool:
        """True if name is a registered prefix or lies above one ('Acme' for 'Acme.Tools.')."""
        lowered = name.lower() + NAMESPACE_SEPARATOR
        with self._lock:
            return any(prefix.lower().startswith(lowered) for prefix in self._dirs if prefix)

    def _matching(self, namespace_part: str) -> list[tuple[str, str]]:
        lowered = namespace_part.lower()
        matches = [(prefix, base) for prefix, base in self.items() if not prefix or lowered.startswith(prefix.lower())]
        if self.prefer_longest_prefix:
            matches.sort(key=lambda item: len(item[0]), reverse=True)
        return matches

    def relative_paths(self, symbolic_name: str) -> Iterator[tuple[str, str]]:
        """Yield (base_dir, relative_path) for every matching mapping, in probe order."""
        namespace_part, tail = split_name(symbolic_name)
        for prefix, base in self._matching(namespace_part):
            remainder = namespace_part[len(prefix) :].replace(NAMESPACE_SEPARATOR, "/")
            yield base, remainder + tail

    def candidates(self, symbolic_name: str) -> Iterator[Path]:
        """Yield every candidate file path in probe order."""
        for base, relative in self.relative_paths(symbolic_name):
            for ext in self.extensions:
                yield Path(base + relative + ext)

    def resolve_candidates(self, symbolic_name: str) -> Path | None:
        """Return the first candidate file that exists, or None."""
        for candidate in self.candidates(symbolic_name):
            if candidate.is_file():
                return candidate
        return None

    def resolve_directory(self, symbolic_name: str) -> Path | None:
        """Return the first existing directory the name maps to, or None."""
        for base, relative in self.relative_paths(symbolic_name):
            candidate = Path(base + relative)
            if candidate.is_dir():
                return candidate
        return None
