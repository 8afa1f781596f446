from collections.abc import Iterable

from geocollection.geometry.values import GeometryCollection, GeometryValue


def _common_srid(members: tuple[GeometryValue, ...]) -> int | None:
    srids = {member.srid for member in members}
    if len(srids) == 1:
        return srids.pop()
    return None

def build(members: Iterable[GeometryValue], srid: int | None = None) -> GeometryCollection:
    """
    Combine ``members`` into one collection, in the given order.

    Nested collections are kept as they are. The CRS of the members is not
    checked here: mismatches are only rejected when the collection is
    persisted. When ``srid`` is omitted the collection takes the srid shared
    by all of its members, if there is one.
    """
    members = tuple(members)
    collection = GeometryCollection(members)
    return collection.with_srid(srid if srid is not None else _common_srid(members))
