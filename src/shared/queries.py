"""Helpers shared by repository queries in every domain."""

from protean.exceptions import ValidationError

DEFAULT_PAGE_SIZE = 20
_BATCH_SIZE = 100


def coerce_enum(enum_cls, value, field_name):
    """Resolve ``value`` (member, value or name) to a member of ``enum_cls``.

    Names match case-insensitively. Unknown values are reported as a
    ValidationError against ``field_name``.
    """
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        pass
    if isinstance(value, str) and value.upper() in enum_cls.__members__:
        return enum_cls[value.upper()]
    raise ValidationError({field_name: [f"Unknown {field_name} '{value}'"]})


def paginate(query, page=0, size=DEFAULT_PAGE_SIZE, sort=None, direction="asc"):
    """Apply page/size/sort parameters to a query and return the ResultSet."""
    if sort:
        query = query.order_by(f"-{sort}" if direction.lower() == "desc" else sort)
    return query.offset(page * size).limit(size).all()


def iterate_all(query, batch_size=_BATCH_SIZE):
    """Yield every record matched by ``query``, fetching in batches.

    Offset paging needs a stable order, so unordered queries are sorted by id.
    """
    if not query._order_by:
        query = query.order_by("id")
    offset = 0
    while True:
        result = query.offset(offset).limit(batch_size).all()
        yield from result.items
        offset += batch_size
        if offset >= result.total or not result.items:
            break
