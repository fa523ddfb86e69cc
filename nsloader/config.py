"""Autoload configuration model and Autoloader construction."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel
from pydantic import Field
from pydantic import field_validator

from .autoload.autoloader import Autoloader
from .autoload.loading import LoadCapability
from .autoload.registry import DEFAULT_EXTENSIONS
from .diagnostics import DiagnosticSink

logger = logging.getLogger(__name__)

MODULES_ROOT_ENV = "NSLOADER_MODULES_ROOT"


class AutoloadSettings(BaseModel):
    """Effective autoload configuration."""

    modules_root: Path | None = Field(default=None, description="Base for relative class paths and the catch-all mapping")
    extensions: list[str] = Field(default_factory=lambda: list(DEFAULT_EXTENSIONS), description="Extensions probed in order")
    namespaces: dict[str, str] = Field(default_factory=dict, description="Namespace prefix -> directory, in registration order")
    classes: dict[str, str] = Field(default_factory=dict, description="Symbolic name -> file path overrides")
    prefer_longest_prefix: bool = Field(default=False, description="Probe most specific prefixes first")
    warn_on_missing_imports: bool = Field(default=False, description="Report unresolved imports")

    @field_validator("extensions")
    @classmethod
    def _check_extensions(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("at least one extension is required")
        for ext in value:
            if not ext.startswith(".") or len(ext) < 2:
                raise ValueError(f"extension must start with '.': {ext!r}")
        return value

    @classmethod
    def from_settings(cls, section: dict[str, Any] | None, env: dict[str, str] | None = None) -> AutoloadSettings:
        """Build from the ``autoload`` settings section.

        ``NSLOADER_MODULES_ROOT`` in env overrides the modules_root entry.
        """
        data = dict(section or {})
        env = os.environ if env is None else env
        if env_root := env.get(MODULES_ROOT_ENV):
            logger.debug(f"[autoload:config] modules_root from {MODULES_ROOT_ENV} ({env_root})")
            data["modules_root"] = env_root
        # YAML turns an empty mapping key into None; keep the catch-all prefix
        if data.get("namespaces"):
            data["namespaces"] = {("" if k is None else str(k)): v for k, v in data["namespaces"].items()}
        return cls.model_validate(data)


def _absolute(path: str | Path, base_dir: Path) -> Path:
    path = Path(path).expanduser()
    return path if path.is_absolute() else base_dir / path


def build_autoloader(
    settings: AutoloadSettings,
    *,
    base_dir: Path | None = None,
    loader: LoadCapability | None = None,
    sink: DiagnosticSink | None = None,
    meta_path: list | None = None,
    start: bool = True,
) -> Autoloader:
    """Create an Autoloader and apply the configured registrations.

    With start=True the autoloader is started first, so the catch-all
    mapping precedes the configured namespaces in probe order.

    Relative modules_root and namespace directories are taken from base_dir
    (default: current directory). Relative class paths keep their meaning:
    relative to the modules root.
    """
    base_dir = base_dir or Path.cwd()

    autoloader = Autoloader(
        _absolute(settings.modules_root, base_dir) if settings.modules_root else None,
        extensions=settings.extensions,
        loader=loader,
        sink=sink,
        meta_path=meta_path,
        prefer_longest_prefix=settings.prefer_longest_prefix,
        warn_on_missing_imports=settings.warn_on_missing_imports,
    )

    if start:
        autoloader.start()

    for prefix, directory in settings.namespaces.items():
        autoloader.register_namespace(prefix, _absolute(directory, base_dir))

    for name, path in settings.classes.items():
        autoloader.register_class(name, path)

    logger.debug(
        f"[autoload:config] built with {len(settings.namespaces)} namespaces, {len(settings.classes)} classes"
    )
    return autoloader
