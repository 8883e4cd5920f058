"""
Repository pattern: read-only data access over a caller-owned SQLModel session.
"""

from .base import BaseEntity, IReadOnlyRepository
from .generic import ReadOnlyRepository
from .predicates import where
from .provider import RepositoryProvider
from .relations import build_load_options, normalize_include

__all__ = [
    "BaseEntity",
    "IReadOnlyRepository",
    "ReadOnlyRepository",
    "RepositoryProvider",
    "build_load_options",
    "normalize_include",
    "where",
]
