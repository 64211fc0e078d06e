"""Git collaborators and diff sampling."""

from .diff import DiffResult, DiffSource
from .hooks import HookManager, HookResult, HookStatus, install_hook, uninstall_hook
from .sampler import sample_diff, split_sections

__all__ = [
    "DiffResult",
    "DiffSource",
    "HookManager",
    "HookResult",
    "HookStatus",
    "install_hook",
    "sample_diff",
    "split_sections",
    "uninstall_hook",
]
