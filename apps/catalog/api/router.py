from fastapi import APIRouter, Depends, Query
from sqlmodel.ext.asyncio.session import AsyncSession
from typing import List, Optional
from repokit.database.manager import get_db
from repokit.repository.provider import RepositoryProvider
from repokit.response import ResponseModel
from ..service import CatalogService

router = APIRouter()

def get_provider(
    db: AsyncSession = Depends(get_db)
) -> RepositoryProvider:
    """Dependency: repositories sharing the request session."""
    return RepositoryProvider(session=db)

def get_catalog_service(provider: RepositoryProvider = Depends(get_provider)) -> CatalogService:
    """Dependency: create CatalogService."""
    return CatalogService(provider)

def parse_include(
    include: Optional[str] = Query(None, description="Comma-separated relation paths, e.g. category,reviews")
) -> List[str]:
    if not include:
        return []
    return [path.strip() for path in include.split(",") if path.strip()]

@router.get("/products")
async def list_products(
    active: Optional[bool] = None,
    include: List[str] = Depends(parse_include),
    service: CatalogService = Depends(get_catalog_service)
):
    """List products, optionally filtered by active flag."""
    result = await service.list_products(active=active, include=include)
    return ResponseModel.success(data=result["items"], total=result["total"])

@router.get("/products/by-sku/{sku}")
async def get_product_by_sku(
    sku: str,
    include: List[str] = Depends(parse_include),
    service: CatalogService = Depends(get_catalog_service)
):
    """Get product by SKU."""
    return ResponseModel.success(data=await service.get_product_by_sku(sku, include))

@router.get("/products/{product_id}")
async def get_product(
    product_id: int,
    include: List[str] = Depends(parse_include),
    service: CatalogService = Depends(get_catalog_service)
):
    """Get product by ID."""
    return ResponseModel.success(data=await service.get_product(product_id, include))

@router.get("/categories")
async def list_categories(
    include: List[str] = Depends(parse_include),
    service: CatalogService = Depends(get_catalog_service)
):
    """List categories."""
    return ResponseModel.success(data=await service.list_categories(include))

@router.get("/categories/{category_id}/products")
async def list_category_products(
    category_id: int,
    service: CatalogService = Depends(get_catalog_service)
):
    """List products of a category."""
    items = await service.list_category_products(category_id)
    return ResponseModel.success(data=items, total=len(items))
