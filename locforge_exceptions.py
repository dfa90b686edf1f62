# -*- coding: utf-8 -*-
"""
LocForge Exceptions Module
Custom exception classes for structured error handling across the application.
"""


class LocForgeError(Exception):
    """
    Base exception class for all LocForge-related errors.

    Attributes:
        message: Human-readable error message
        details: Optional additional details (dict, string, etc.)
    """

    def __init__(self, message: str, details=None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# Loader Exceptions
# =============================================================================

class LoaderError(LocForgeError):
    """Base exception for namespace loading errors."""
    pass


class NetworkFailureError(LoaderError):
    """Raised when retrieving one language of a namespace fails."""

    def __init__(self, message: str, language: str = None, namespace: str = None):
        super().__init__(message, details={'language': language, 'namespace': namespace})
        self.language = language
        self.namespace = namespace


class NamespaceUnavailableError(LoaderError):
    """Raised when no language of a namespace could be obtained."""

    def __init__(self, message: str, namespace: str = None):
        super().__init__(message, details={'namespace': namespace})
        self.namespace = namespace


# =============================================================================
# Overlay Exceptions
# =============================================================================

class OverlayError(LocForgeError):
    """Base exception for edit overlay errors."""
    pass


class EmptyOverlayError(OverlayError):
    """Raised when exporting while no edits have been committed."""
    pass


class NoActiveEditError(OverlayError):
    """Raised when committing without a key and without an edit in progress."""
    pass


class CommitError(OverlayError):
    """Raised when an edit could not be persisted. Nothing is applied in that case."""

    def __init__(self, message: str, namespace: str = None, key: str = None):
        super().__init__(message, details={'namespace': namespace, 'key': key})
        self.namespace = namespace
        self.key = key


# =============================================================================
# Tree Exceptions
# =============================================================================

class TreeError(LocForgeError):
    """Base exception for locale tree errors."""
    pass


class MalformedPathError(TreeError):
    """Raised in strict mode when a path walks through a non-object node."""

    def __init__(self, message: str, path: str = None, segment: str = None):
        super().__init__(message, details={'path': path, 'segment': segment})
        self.path = path
        self.segment = segment


# =============================================================================
# Storage Exceptions
# =============================================================================

class StorageError(LocForgeError):
    """Base exception for persistent storage errors."""
    pass


class StorageLoadError(StorageError):
    """Raised when reading the storage file fails."""
    pass


class StorageSaveError(StorageError):
    """Raised when writing the storage file fails."""
    pass
