"""
Repository provider: repositories sharing one caller-owned session.
"""

from typing import Dict, Optional, Tuple, Type
from sqlmodel.ext.asyncio.session import AsyncSession
from repokit.exceptions.errors import InvalidArgument
from .base import BaseEntity
from .generic import ReadOnlyRepository


class RepositoryProvider:
    """Hands out cached repositories bound to the same session; commits and rollbacks stay with the caller."""

    def __init__(self, session: Optional[AsyncSession] = None):
        if session is None:
            raise InvalidArgument("session", "Session must be provided. Use RepositoryProvider.from_session() or pass session explicitly.")

        self.session = session
        self._repositories: Dict[Tuple[type, type], ReadOnlyRepository] = {}

    @classmethod
    async def from_session(cls, session: AsyncSession) -> "RepositoryProvider":
        """Create a provider from an existing session."""
        return cls(session=session)

    def get_repository(self, model: Type[BaseEntity], repo_class: Type[ReadOnlyRepository] = ReadOnlyRepository):
        """
        Get or create the repository for ``model`` (cached per class and model).

        ``repo_class`` is either ReadOnlyRepository itself or a subclass whose
        constructor takes only the session, like ProductRepository.
        """
        cache_key = (repo_class, model)
        if cache_key not in self._repositories:
            if repo_class is ReadOnlyRepository:
                repository = ReadOnlyRepository(self.session, model)
            else:
                repository = repo_class(self.session)
            if repository.model is not model:
                raise InvalidArgument("model", f"{repo_class.__name__} serves {repository.model.__name__}, not {model.__name__}")
            self._repositories[cache_key] = repository
        return self._repositories[cache_key]
