"""
Read-only repository contract and the entity marker it is parameterized over.
"""

from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, Generic, Iterable, List, Optional, Tuple, TypeVar, Union
from sqlmodel import SQLModel, Field
from sqlalchemy.orm import InstrumentedAttribute


class BaseEntity(SQLModel):
    """Marker base for entities: table models derive from it with ``table=True``."""
    id: Optional[int] = Field(default=None, primary_key=True)


E = TypeVar("E", bound=BaseEntity)

# "products.reviews", Product.category, or (Category.products, Product.reviews)
IncludePath = Union[str, InstrumentedAttribute, Tuple[InstrumentedAttribute, ...]]
Include = Optional[Iterable[IncludePath]]

# A SQL boolean expression, e.g. Product.active == True
Predicate = Any


class IReadOnlyRepository(ABC, Generic[E]):
    """Repository interface; read-only data access for one entity type."""

    @abstractmethod
    async def get_all(self, include: Include = ()) -> List[E]:
        """Get every entity of the type, eager-loading ``include``."""
        pass

    @abstractmethod
    def find_many(self, predicate: Predicate, include: Include = ()) -> AsyncIterator[E]:
        """Lazily iterate the entities matching ``predicate``; nothing runs until iterated."""
        pass

    @abstractmethod
    async def find_one(self, predicate: Predicate, include: Include = ()) -> Optional[E]:
        """
        Get one entity matching ``predicate``, or None when nothing matches.

        If several entities match, which one is returned is unspecified.
        """
        pass

    @abstractmethod
    async def count(self, predicate: Predicate = None) -> int:
        """Count entities, optionally only those matching ``predicate``."""
        pass
