from typing import Any, Dict, List, Optional, Sequence, Tuple
from loguru import logger
from repokit.exceptions.handler import BusinessException
from repokit.repository.base import BaseEntity
from repokit.repository.predicates import where
from repokit.repository.provider import RepositoryProvider
from repokit.repository.relations import normalize_include
from .models import Category, Product
from .repository import ProductRepository


def to_dict(entity: BaseEntity, paths: Sequence[Tuple[str, ...]] = ()) -> Dict[str, Any]:
    """Dump entity columns plus the eager-loaded relations named by ``paths``."""
    data = entity.model_dump()
    nested: Dict[str, List[Tuple[str, ...]]] = {}
    for names in paths:
        if names:
            nested.setdefault(names[0], []).append(names[1:])

    for name, rest in nested.items():
        value = getattr(entity, name)
        if value is None:
            data[name] = None
        elif isinstance(value, list):
            data[name] = [to_dict(item, rest) for item in value]
        else:
            data[name] = to_dict(value, rest)
    return data


class CatalogService:
    """Read-only catalog queries; every lookup goes through the repositories of one provider."""

    def __init__(self, provider: RepositoryProvider):
        self.provider = provider

    @property
    def products(self) -> ProductRepository:
        return self.provider.get_repository(Product, ProductRepository)

    @property
    def categories(self):
        return self.provider.get_repository(Category)

    async def list_products(self, active: Optional[bool] = None, include: Sequence[str] = ()) -> Dict[str, Any]:
        """List products, all of them or only those with the given active flag."""
        paths = normalize_include(Product, include)
        if active is None:
            items = await self.products.get_all(include)
        else:
            predicate = where(Product, active=active)
            items = [product async for product in self.products.find_many(predicate, include)]
        total = len(items)

        logger.info(f"Listed {len(items)} product(s), active={active}, include={list(include or ())}")
        return {"items": [to_dict(p, paths) for p in items], "total": total}

    async def get_product(self, product_id: int, include: Sequence[str] = ()) -> Dict[str, Any]:
        product = await self.products.find_one(Product.id == product_id, include)
        if product is None:
            raise BusinessException("Product not found", status_code=404, code=404)
        return to_dict(product, normalize_include(Product, include))

    async def get_product_by_sku(self, sku: str, include: Sequence[str] = ()) -> Dict[str, Any]:
        product = await self.products.get_by_sku(sku, include)
        if product is None:
            raise BusinessException(f"Product with SKU '{sku}' not found", status_code=404, code=404)
        return to_dict(product, normalize_include(Product, include))

    async def list_categories(self, include: Sequence[str] = ()) -> List[Dict[str, Any]]:
        paths = normalize_include(Category, include)
        categories = await self.categories.get_all(include)
        return [to_dict(c, paths) for c in categories]

    async def list_category_products(self, category_id: int) -> List[Dict[str, Any]]:
        """Products of one category; 404 when the category itself does not exist."""
        category = await self.categories.find_one(Category.id == category_id)
        if category is None:
            raise BusinessException("Category not found", status_code=404, code=404)
        return [to_dict(p) async for p in self.products.list_by_category(category_id)]
