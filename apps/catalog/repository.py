"""Catalog repository implementations."""

from typing import AsyncIterator, Optional
from repokit.repository.base import Include
from repokit.repository.generic import ReadOnlyRepository
from repokit.repository.predicates import where
from .models import Product


class ProductRepository(ReadOnlyRepository[Product]):
    """Product repository."""

    def __init__(self, session):
        super().__init__(session, Product)

    async def get_by_sku(self, sku: str, include: Include = ()) -> Optional[Product]:
        """Find product by SKU."""
        return await self.find_one(where(Product, sku=sku), include)

    def list_active(self, include: Include = ()) -> AsyncIterator[Product]:
        """Iterate active products."""
        return self.find_many(Product.active == True, include)  # noqa: E712

    def list_by_category(self, category_id: int, include: Include = ()) -> AsyncIterator[Product]:
        """Iterate products of a category, active or not."""
        return self.find_many(Product.category_id == category_id, include)
