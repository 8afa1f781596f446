from collections.abc import Iterator

from geocollection.enums.geometry_kind import EXTRACTABLE_KINDS, GeometryKind
from geocollection.geometry.values import GeometryCollection, GeometryValue


def _walk(collection: GeometryCollection, kind: GeometryKind) -> Iterator[GeometryValue]:
    for member in collection.members:
        if member.kind == GeometryKind.GEOMETRYCOLLECTION:
            yield from _walk(member, kind)
        elif member.kind == kind:
            yield member
        elif member.kind.is_multi and member.kind.single == kind:
            yield from member.geoms
        # anything else is skipped on purpose

def extract(collection: GeometryCollection, kind: GeometryKind | str) -> list[GeometryValue]:
    """
    Return the members of ``collection`` matching ``kind``, in encounter order.

    ``kind`` is one of Point, LineString or Polygon. Multi geometries of that
    kind are split into their parts and nested collections are walked depth
    first. Members of other kinds are skipped without error, so an empty list
    is a valid answer.
    """
    kind = GeometryKind(kind)
    if kind not in EXTRACTABLE_KINDS:
        raise ValueError(f'Cannot extract {kind}: expected one of {", ".join(sorted(EXTRACTABLE_KINDS))}')
    return list(_walk(collection, kind))
