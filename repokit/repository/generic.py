"""
Generic read-only repository over a SQLModel async session.
"""

from typing import AsyncIterator, List, Optional, Type
from loguru import logger
from sqlalchemy import func, inspect
from sqlalchemy.exc import NoInspectionAvailable
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from repokit.exceptions.errors import InvalidArgument
from .base import BaseEntity, E, IReadOnlyRepository, Include, Predicate
from .relations import build_load_options


class ReadOnlyRepository(IReadOnlyRepository[E]):
    """
    Read-only repository for one entity type, usable as-is or subclassed for custom queries.

    The session belongs to the caller: the repository never adds, flushes,
    commits or closes it, and expects at most one operation in flight on it.
    Query failures raised by the session propagate unchanged.
    """

    def __init__(self, session: AsyncSession, model: Type[E]):
        if session is None:
            raise InvalidArgument("session")
        if model is None:
            raise InvalidArgument("model")
        if not (isinstance(model, type) and issubclass(model, BaseEntity)):
            raise InvalidArgument("model", f"{model!r} is not a BaseEntity subclass")
        try:
            inspect(model)
        except NoInspectionAvailable:
            raise InvalidArgument("model", f"{model.__name__} is not a mapped table model") from None

        self.session = session
        self.model = model

    @staticmethod
    def _require(predicate: Predicate):
        # .where(None) renders WHERE NULL and silently matches nothing
        if predicate is None:
            raise InvalidArgument("predicate", "Predicate must not be None; use where(model) to match every row")

    def _query(self, include: Include = ()):
        """SELECT over the entity with one eager-load option per include path."""
        statement = select(self.model)
        options = build_load_options(self.model, include)
        if options:
            statement = statement.options(*options)
        return statement

    async def get_all(self, include: Include = ()) -> List[E]:
        """Get every entity of the type, eager-loading ``include``."""
        statement = self._query(include)
        logger.debug(f"{self.model.__name__}.get_all include={include!r}")
        result = await self.session.exec(statement)
        return list(result.all())

    def find_many(self, predicate: Predicate, include: Include = ()) -> AsyncIterator[E]:
        """
        Iterate the entities matching ``predicate``.

        The statement is built (and include paths validated) immediately;
        the round trip happens when iteration starts::

            async for product in repo.find_many(Product.active == True):
                ...
        """
        self._require(predicate)
        statement = self._query(include).where(predicate)
        return self._iterate(statement, include)

    async def _iterate(self, statement, include: Include) -> AsyncIterator[E]:
        logger.debug(f"{self.model.__name__}.find_many include={include!r}")
        result = await self.session.exec(statement)
        for entity in result:
            yield entity

    async def find_one(self, predicate: Predicate, include: Include = ()) -> Optional[E]:
        """Get one entity matching ``predicate`` (no ordering among ties), or None."""
        self._require(predicate)
        statement = self._query(include).where(predicate).limit(1)
        logger.debug(f"{self.model.__name__}.find_one include={include!r}")
        result = await self.session.exec(statement)
        return result.first()

    async def count(self, predicate: Predicate = None) -> int:
        """Count entities, optionally only those matching ``predicate``."""
        statement = select(func.count(self.model.id))
        if predicate is not None:
            statement = statement.where(predicate)
        result = await self.session.exec(statement)
        return result.one()
