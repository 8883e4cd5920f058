"""Predicate helpers: keyword filters turned into SQL boolean expressions."""

from sqlalchemy import and_, inspect, true
from sqlalchemy.exc import NoInspectionAvailable
from repokit.exceptions.errors import InvalidArgument


def where(model: type, **filters):
    """
    Build an equality conjunction over columns of ``model``.

    where(Product, active=True, category_id=3) is the same predicate as
    and_(Product.active == True, Product.category_id == 3). Unknown column
    names raise InvalidArgument; no filters matches every row.
    """
    try:
        columns = inspect(model).columns
    except NoInspectionAvailable:
        raise InvalidArgument("model", f"{model!r} is not a mapped table model") from None

    clauses = []
    for key, value in filters.items():
        if key not in columns:
            raise InvalidArgument(key, f"{model.__name__} has no column '{key}'")
        column = getattr(model, key)
        clauses.append(column.is_(None) if value is None else column == value)

    if not clauses:
        return true()
    return and_(*clauses)
