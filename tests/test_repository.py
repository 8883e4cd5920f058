"""
Generic read-only repository against an in-memory SQLite catalog.
"""
import pytest
from unittest.mock import AsyncMock, MagicMock
from sqlalchemy import inspect
from sqlalchemy.exc import OperationalError
from sqlmodel.ext.asyncio.session import AsyncSession

from apps.catalog.models import Category, Product, Review
from apps.catalog.repository import ProductRepository
from repokit.exceptions.errors import InvalidArgument, InvalidRelationPath, QueryFailure
from repokit.repository import BaseEntity, ReadOnlyRepository, where


def ids(entities):
    return {entity.id for entity in entities}


async def collect(iterator):
    return [item async for item in iterator]


@pytest.mark.asyncio
async def test_get_all_returns_every_entity(catalog: AsyncSession):
    repo = ReadOnlyRepository(catalog, Product)

    products = await repo.get_all()

    assert len(products) == 3
    assert ids(products) == {1, 2, 3}


@pytest.mark.asyncio
async def test_get_all_accepts_missing_include(catalog: AsyncSession):
    repo = ReadOnlyRepository(catalog, Category)

    assert ids(await repo.get_all(None)) == {1, 2}
    assert ids(await repo.get_all([])) == {1, 2}


@pytest.mark.asyncio
async def test_find_many_returns_matching_subset(catalog: AsyncSession):
    repo = ReadOnlyRepository(catalog, Product)

    active = await collect(repo.find_many(Product.active == True))  # noqa: E712
    cheap = await collect(repo.find_many(Product.price < 25))

    assert ids(active) == {1, 3}
    assert ids(cheap) == {1, 2}


@pytest.mark.asyncio
async def test_find_one_by_flag_and_not_found(catalog: AsyncSession):
    repo = ReadOnlyRepository(catalog, Product)

    inactive = await repo.find_one(Product.active == False)  # noqa: E712
    missing = await repo.find_one(Product.id == 99)

    assert inactive.id == 2
    assert inactive.sku == "SAW-2"
    assert missing is None


@pytest.mark.asyncio
async def test_find_one_among_ties_satisfies_predicate(catalog: AsyncSession):
    repo = ReadOnlyRepository(catalog, Product)

    product = await repo.find_one(Product.category_id == 1)

    assert product is not None
    assert product.category_id == 1


@pytest.mark.asyncio
async def test_include_does_not_change_result_set(catalog: AsyncSession):
    repo = ReadOnlyRepository(catalog, Product)
    predicate = Product.active == True  # noqa: E712

    plain = await collect(repo.find_many(predicate, []))
    catalog.expunge_all()
    loaded = await collect(repo.find_many(predicate, ["category"]))

    assert ids(plain) == ids(loaded) == {1, 3}
    for product in loaded:
        assert "category" not in inspect(product).unloaded
    assert {p.category.name for p in loaded} == {"Tools", "Garden"}


@pytest.mark.asyncio
async def test_duplicate_include_paths_load_once(catalog: AsyncSession):
    repo = ReadOnlyRepository(catalog, Product)

    product = await repo.find_one(Product.id == 1, ["reviews", "reviews", Product.reviews])

    assert product.id == 1
    assert sorted(r.rating for r in product.reviews) == [4, 5]


@pytest.mark.asyncio
async def test_dotted_include_path_loads_nested_relations(catalog: AsyncSession):
    repo = ReadOnlyRepository(catalog, Category)

    categories = await repo.get_all(["products.reviews"])

    by_name = {c.name: c for c in categories}
    tools = by_name["Tools"]
    assert {p.sku for p in tools.products} == {"HAM-1", "SAW-2"}
    assert sum(len(p.reviews) for p in tools.products) == 2
    assert len(by_name["Garden"].products[0].reviews) == 1


@pytest.mark.asyncio
async def test_attribute_chain_include(catalog: AsyncSession):
    repo = ReadOnlyRepository(catalog, Review)

    review = await repo.find_one(Review.id == 3, [(Review.product, Product.category)])

    assert review.product.sku == "HOSE-3"
    assert review.product.category.name == "Garden"


@pytest.mark.asyncio
async def test_unknown_include_path_fails_before_query():
    session = MagicMock()
    session.exec = AsyncMock(return_value=[])
    repo = ReadOnlyRepository(session, Product)

    with pytest.raises(InvalidRelationPath) as exc_info:
        repo.find_many(Product.active == True, ["category.missing"])  # noqa: E712

    assert isinstance(exc_info.value, QueryFailure)
    assert "missing" in str(exc_info.value)
    session.exec.assert_not_called()


@pytest.mark.asyncio
async def test_include_attribute_of_other_entity_is_rejected(catalog: AsyncSession):
    repo = ReadOnlyRepository(catalog, Product)

    with pytest.raises(InvalidRelationPath):
        await repo.get_all([Category.products])
    with pytest.raises(InvalidRelationPath):
        await repo.get_all([Product.sku])


@pytest.mark.asyncio
async def test_find_many_is_lazy():
    hammer = Product(id=1, sku="HAM-1", name="Hammer", active=True)
    session = MagicMock()
    session.exec = AsyncMock(return_value=[hammer])
    repo = ReadOnlyRepository(session, Product)

    iterator = repo.find_many(Product.active == True)  # noqa: E712
    session.exec.assert_not_called()

    assert await collect(iterator) == [hammer]
    session.exec.assert_awaited_once()


@pytest.mark.asyncio
async def test_session_failure_propagates_unchanged():
    failure = OperationalError("SELECT", {}, Exception("database is locked"))
    session = MagicMock()
    session.exec = AsyncMock(side_effect=failure)
    repo = ReadOnlyRepository(session, Product)

    with pytest.raises(OperationalError) as exc_info:
        await repo.get_all()

    assert exc_info.value is failure


def test_construction_without_session_fails():
    with pytest.raises(InvalidArgument) as exc_info:
        ReadOnlyRepository(None, Product)

    assert exc_info.value.argument == "session"
    assert isinstance(exc_info.value, ValueError)


def test_construction_requires_table_entity():
    session = MagicMock()

    with pytest.raises(InvalidArgument):
        ReadOnlyRepository(session, None)
    with pytest.raises(InvalidArgument):
        ReadOnlyRepository(session, BaseEntity)
    with pytest.raises(InvalidArgument):
        ReadOnlyRepository(session, dict)


@pytest.mark.asyncio
async def test_count(catalog: AsyncSession):
    repo = ReadOnlyRepository(catalog, Product)

    assert await repo.count() == 3
    assert await repo.count(Product.active == True) == 2  # noqa: E712
    assert await repo.count(Product.id == 99) == 0


@pytest.mark.asyncio
async def test_where_builds_equality_predicates(catalog: AsyncSession):
    repo = ReadOnlyRepository(catalog, Product)

    tools_active = await collect(repo.find_many(where(Product, category_id=1, active=True)))
    everything = await collect(repo.find_many(where(Product)))

    assert ids(tools_active) == {1}
    assert ids(everything) == {1, 2, 3}


def test_where_rejects_unknown_column():
    with pytest.raises(InvalidArgument) as exc_info:
        where(Product, colour="red")

    assert exc_info.value.argument == "colour"


@pytest.mark.asyncio
async def test_product_repository_queries(catalog: AsyncSession):
    repo = ProductRepository(catalog)

    hose = await repo.get_by_sku("HOSE-3", ["category"])
    unknown = await repo.get_by_sku("NOPE")
    active = await collect(repo.list_active())
    tools = await collect(repo.list_by_category(1))

    assert hose.category.name == "Garden"
    assert unknown is None
    assert ids(active) == {1, 3}
    assert ids(tools) == {1, 2}


@pytest.mark.asyncio
async def test_none_predicate_is_rejected_before_query():
    session = MagicMock()
    session.exec = AsyncMock(return_value=[])
    repo = ReadOnlyRepository(session, Product)

    with pytest.raises(InvalidArgument) as exc_info:
        repo.find_many(None)
    assert exc_info.value.argument == "predicate"

    with pytest.raises(InvalidArgument):
        await repo.find_one(None)

    session.exec.assert_not_called()


@pytest.mark.asyncio
async def test_match_everything_agrees_with_count(catalog: AsyncSession):
    repo = ReadOnlyRepository(catalog, Product)

    total = await repo.count()
    everything = await collect(repo.find_many(where(Product)))
    first = await repo.find_one(where(Product))

    assert len(everything) == total == 3
    assert first is not None


def test_where_rejects_unmapped_class():
    with pytest.raises(InvalidArgument) as exc_info:
        where(dict, name="x")
    assert exc_info.value.argument == "model"

    with pytest.raises(InvalidArgument):
        where(BaseEntity)
