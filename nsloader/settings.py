"""Settings manager for nsloader settings.yaml files.

Manages three-scope settings system:
- User global (~/.nsloader/settings.yaml)
- Project (.nsloader/settings.yaml)
- Local (.nsloader/settings.local.yaml)

Autoload configuration lives under the ``autoload`` key:

```yaml
autoload:
  modules_root: ./modules
  extensions: [".py", ".pyw", ".pyc"]
  namespaces:
    "Acme.": ./vendor/acme
  classes:
    Acme.Legacy_Thing: legacy/thing.py
```
"""

import logging
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

SECTION = "autoload"
SCOPES = ("user", "project", "local")


class SettingsManager:
    """Manages settings across user/project/local scopes."""

    def __init__(self, nsloader_dir: Path | None = None, user_dir: Path | None = None):
        """Initialize settings manager with standard paths.

        Args:
            nsloader_dir: Base directory for project/local settings (for testing).
                          If None, uses .nsloader in current directory.
            user_dir: Base directory for user settings (for testing).
                      If None, uses ~/.nsloader.
        """
        if nsloader_dir is None:
            nsloader_dir = Path(".nsloader")
        if user_dir is None:
            user_dir = Path.home() / ".nsloader"

        self.user_settings_file = user_dir / "settings.yaml"
        self.project_settings_file = nsloader_dir / "settings.yaml"
        self.local_settings_file = nsloader_dir / "settings.local.yaml"

    def scope_file(self, scope: str) -> Path:
        """Get the settings file for a scope name.

        Raises:
            ValueError: Unknown scope
        """
        file_map = {
            "user": self.user_settings_file,
            "project": self.project_settings_file,
            "local": self.local_settings_file,
        }
        if scope not in file_map:
            raise ValueError(f"Unknown scope '{scope}' (expected one of: {', '.join(SCOPES)})")
        return file_map[scope]

    def get_autoload_section(self, scope: str | None = None) -> dict[str, Any]:
        """Get the autoload section, merged across scopes or from one scope."""
        if scope is None:
            settings = self.get_merged_settings()
        else:
            settings = self._read_settings(self.scope_file(scope)) or {}
        return settings.get(SECTION) or {}

    def get_namespaces(self) -> dict[str, str]:
        """Namespace prefix -> directory entries merged from all settings, in file order."""
        return dict(self.get_autoload_section().get("namespaces") or {})

    def get_classes(self) -> dict[str, str]:
        """Explicit name -> path entries merged from all settings."""
        return dict(self.get_autoload_section().get("classes") or {})

    def add_namespace(self, prefix: str, directory: str, scope: str = "project") -> None:
        """Add namespace mapping.

        Args:
            prefix: Namespace prefix ('' for catch-all)
            directory: Directory path
            scope: "user", "project", or "local"
        """
        self._update_settings(self.scope_file(scope), {SECTION: {"namespaces": {prefix: directory}}})
        logger.info(f"Added {scope} namespace mapping {prefix!r} -> {directory}")

    def remove_namespace(self, prefix: str, scope: str = "project") -> bool:
        """Remove namespace mapping.

        Returns:
            True if removed, False if not found
        """
        return self._remove_entry("namespaces", prefix, scope)

    def add_class(self, name: str, path: str, scope: str = "project") -> None:
        """Add explicit class registration."""
        self._update_settings(self.scope_file(scope), {SECTION: {"classes": {name: path}}})
        logger.info(f"Added {scope} class registration {name} -> {path}")

    def remove_class(self, name: str, scope: str = "project") -> bool:
        """Remove explicit class registration.

        Returns:
            True if removed, False if not found
        """
        return self._remove_entry("classes", name, scope)

    def get_merged_settings(self) -> dict[str, Any]:
        """Get merged settings from all scopes.

        Merge order (later overrides earlier):
        1. User settings
        2. Project settings
        3. Local settings

        Returns:
            Merged settings dictionary
        """
        merged: dict[str, Any] = {}

        for path in (self.user_settings_file, self.project_settings_file, self.local_settings_file):
            settings = self._read_settings(path)
            if settings:
                merged = self._deep_merge(merged, settings)

        return merged

    def _remove_entry(self, table: str, key: str, scope: str) -> bool:
        target_file = self.scope_file(scope)
        settings = self._read_settings(target_file)

        section = (settings or {}).get(SECTION) or {}
        entries = section.get(table) or {}
        if key not in entries:
            return False

        del entries[key]

        # Clean up empty sections
        if not entries:
            del section[table]
        if not section:
            del settings[SECTION]

        self._write_settings(target_file, settings)
        logger.info(f"Removed {scope} {table} entry {key!r}")
        return True

    def _read_settings(self, path: Path) -> dict[str, Any] | None:
        """Read settings from YAML file.

        Args:
            path: Path to settings file

        Returns:
            Settings dict or None if file doesn't exist
        """
        if not path.exists():
            return None

        try:
            with open(path) as f:
                data = yaml.safe_load(f)
                return data if data else {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to read settings from {path}: {e}")
            return None

    def _write_settings(self, path: Path, settings: dict[str, Any]) -> None:
        """Write settings to YAML file.

        Args:
            path: Path to settings file
            settings: Settings dictionary
        """
        path.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(path, "w") as f:
                yaml.dump(settings, f, default_flow_style=False, sort_keys=False)
        except OSError as e:
            logger.error(f"Failed to write settings to {path}: {e}")
            raise

    def _update_settings(self, path: Path, updates: dict[str, Any]) -> None:
        """Update settings file with new values (deep merge).

        Args:
            path: Path to settings file
            updates: Updates to merge
        """
        existing = self._read_settings(path) or {}
        merged = self._deep_merge(existing, updates)
        self._write_settings(path, merged)

    def _deep_merge(self, base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries.

        Args:
            base: Base dictionary
            overlay: Overlay dictionary (takes precedence)

        Returns:
            Merged dictionary
        """
        result = base.copy()

        for key, value in overlay.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result
