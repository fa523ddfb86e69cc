"""CLI command groups for nsloader."""

__all__ = [
    "classes",
    "config",
    "namespace",
    "resolve",
]
