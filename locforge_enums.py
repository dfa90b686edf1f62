"""
LocForge enum definitions.
"""

from enum import Enum


class LoadState(str, Enum):
    """Per-namespace loading state, driven by the NamespaceLoader."""
    NOT_REQUESTED = 'not_requested'
    LOADING = 'loading'
    LOADED = 'loaded'
    PARTIAL = 'partial'     # some language loaded, at least one retrieval failed
    FAILED = 'failed'       # no data for either language


class NoticeLevel(str, Enum):
    """Severity of user-visible notices emitted by the editor controller."""
    INFO = 'info'
    SUCCESS = 'success'
    WARNING = 'warning'
    ERROR = 'error'
