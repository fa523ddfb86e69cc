"""Convention-based lazy loading of symbolic names.

A dotted name such as ``Acme.Widgets.Gadget`` is resolved to a file through
explicit per-name registrations first, then namespace prefix -> directory
mappings, and the file is loaded on first reference.
"""

from .autoloader import Autoloader
from .autoloader import get_default_autoloader
from .autoloader import reset_default_autoloader
from .finder import AutoloadFinder
from .loading import LoadCapability
from .loading import SourceUnitLoader
from .registry import DEFAULT_EXTENSIONS
from .registry import ExplicitRegistry
from .registry import NamespaceRegistry
from .resolver import Resolver

__all__ = [
    "Autoloader",
    "AutoloadFinder",
    "DEFAULT_EXTENSIONS",
    "ExplicitRegistry",
    "LoadCapability",
    "NamespaceRegistry",
    "Resolver",
    "SourceUnitLoader",
    "get_default_autoloader",
    "reset_default_autoloader",
]
