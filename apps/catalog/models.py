from typing import List, Optional
from sqlmodel import Field, Relationship
from repokit.repository.base import BaseEntity

class Category(BaseEntity, table=True):
    __tablename__ = "categories"
    name: str = Field(unique=True, index=True)
    description: Optional[str] = Field(default=None, max_length=500)

    products: List["Product"] = Relationship(back_populates="category")

class Product(BaseEntity, table=True):
    """Catalog product; inactive products stay listed but are hidden from the storefront."""
    __tablename__ = "products"
    sku: str = Field(unique=True, index=True, max_length=64)
    name: str = Field(max_length=255)
    price: float = Field(default=0.0, ge=0)
    active: bool = Field(default=True, index=True)
    category_id: Optional[int] = Field(default=None, foreign_key="categories.id", index=True)

    category: Optional[Category] = Relationship(back_populates="products")
    reviews: List["Review"] = Relationship(back_populates="product")

class Review(BaseEntity, table=True):
    __tablename__ = "reviews"
    product_id: int = Field(foreign_key="products.id", index=True)
    rating: int = Field(ge=1, le=5)
    body: Optional[str] = None

    product: Optional[Product] = Relationship(back_populates="reviews")
