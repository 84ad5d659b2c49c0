"""CLI output helpers."""

from .colors import badge, bold, dim, error, info, kv, section, success, warning

__all__ = ["badge", "bold", "dim", "error", "info", "kv", "section", "success", "warning"]
