"""
Model registration: import every table model here so SQLModel.metadata knows them
(Alembic-free: tests build the schema with create_all).
"""
from apps.catalog.models import Category, Product, Review

__all__ = ["Category", "Product", "Review"]
