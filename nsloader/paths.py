"""CLI-specific path policy and dependency injection helpers.

This module centralizes the CLI's path decisions: where settings files live
and how an Autoloader is assembled from them. Library code receives paths
and collaborators via injection; this module provides the CLI's choices.
"""

from pathlib import Path
from typing import Literal

from .autoload.autoloader import Autoloader
from .config import AutoloadSettings
from .config import build_autoloader
from .diagnostics import DiagnosticSink
from .settings import SettingsManager

# Type alias for scope names used in CLI
ScopeType = Literal["local", "project", "global"]

# Map CLI scope names to settings scopes
_SCOPE_MAP: dict[ScopeType, str] = {
    "local": "local",
    "project": "project",
    "global": "user",
}


def is_running_from_home() -> bool:
    """Check if running from the home directory.

    Returns:
        True if cwd is the user's home directory
    """
    return Path.cwd() == Path.home()


def create_settings_manager() -> SettingsManager:
    """Get CLI settings paths (APP LAYER POLICY).

    Returns:
        SettingsManager with CLI conventions:
        - User: ~/.nsloader/settings.yaml
        - Project: .nsloader/settings.yaml
        - Local: .nsloader/settings.local.yaml
    """
    return SettingsManager(nsloader_dir=Path.cwd() / ".nsloader")


def settings_scope(scope: ScopeType | None) -> str:
    """Map a CLI scope flag to a settings scope.

    When no scope is given, project scope is used, except from the home
    directory where only the user scope is meaningful.
    """
    if scope is None:
        return "user" if is_running_from_home() else "project"
    return _SCOPE_MAP[scope]


def load_autoload_settings(manager: SettingsManager | None = None) -> AutoloadSettings:
    manager = manager or create_settings_manager()
    return AutoloadSettings.from_settings(manager.get_autoload_section())


def create_autoloader(
    *,
    sink: DiagnosticSink | None = None,
    manager: SettingsManager | None = None,
    meta_path: list | None = None,
    start: bool = True,
) -> Autoloader:
    """Create an Autoloader configured from the merged settings files.

    Args:
        sink: Diagnostic sink (default: log at WARNING)
        manager: Settings source (default: CLI settings paths)
        meta_path: Finder list for the import hook (default: sys.meta_path)
        start: Start the autoloader before applying configured mappings
    """
    settings = load_autoload_settings(manager)
    return build_autoloader(settings, base_dir=Path.cwd(), sink=sink, meta_path=meta_path, start=start)
