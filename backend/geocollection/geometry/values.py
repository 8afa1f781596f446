"""
Immutable simple-feature geometry values.

Every value is a frozen dataclass tagged with a ``GeometryKind``. Constructors
validate their input before anything is stored, so a value that exists is
always structurally valid:

- coordinates hold 2 to 4 numbers (X, Y, optional Z, optional M),
- all coordinates of one geometry share a single ``CoordinateLayout``,
- line strings have at least two vertices,
- polygon rings are closed and have at least four vertices.

Values carry an optional ``srid`` (EPSG code). ``None`` means the CRS was
never declared.
"""

from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import InitVar, dataclass, field, replace
from numbers import Integral, Real
from typing import ClassVar

from geocollection.core.exceptions import (
    InconsistentDimensionality,
    InsufficientCoordinates,
    InvalidCoordinateDimension,
    UnclosedRing,
)
from geocollection.enums.coordinate_layout import CoordinateLayout
from geocollection.enums.geometry_kind import GeometryKind


Number = int | float
Coordinate = tuple[Number, ...]
CoordinateSequence = tuple[Coordinate, ...]
SequenceMapper = Callable[[CoordinateSequence, CoordinateLayout], Sequence[Sequence[Number]]]

MIN_LINESTRING_SIZE = 2
MIN_RING_SIZE = 4


def _is_number(value) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)

def _normalize_number(value) -> Number:
    return int(value) if isinstance(value, Integral) else float(value)

def _as_coordinate(values, measured: bool) -> tuple[Coordinate, CoordinateLayout]:
    if isinstance(values, Point):
        return values.coordinates, values.layout
    try:
        items = tuple(values)
    except TypeError:
        raise InvalidCoordinateDimension(f'Coordinate must be a sequence of 2 to 4 numbers, got {values!r}') from None
    if not 2 <= len(items) <= 4 or not all(_is_number(item) for item in items):
        raise InvalidCoordinateDimension(f'Coordinate must be a sequence of 2 to 4 numbers, got {values!r}')
    return tuple(_normalize_number(item) for item in items), CoordinateLayout.from_size(len(items), measured)

def _as_coordinate_sequence(rows, measured: bool) -> tuple[CoordinateSequence, CoordinateLayout | None]:
    try:
        rows = list(rows)
    except TypeError:
        raise InvalidCoordinateDimension(f'Expected a sequence of coordinates, got {rows!r}') from None

    coordinates = []
    layout = None
    for index, row in enumerate(rows):
        coordinate, row_layout = _as_coordinate(row, measured)
        if layout is None:
            layout = row_layout
        elif row_layout != layout:
            raise InconsistentDimensionality(
                f'Coordinate {index} has layout {row_layout.value}, expected {layout.value}'
            )
        coordinates.append(coordinate)
    return tuple(coordinates), layout

def _merge_layouts(layouts: Iterable[CoordinateLayout | None]) -> CoordinateLayout | None:
    merged = None
    for layout in layouts:
        if layout is None:
            continue
        if merged is None:
            merged = layout
        elif layout != merged:
            raise InconsistentDimensionality(f'Mixed coordinate layouts: {merged.value} and {layout.value}')
    return merged

def _as_ring(rows, measured: bool, index: int) -> tuple[CoordinateSequence, CoordinateLayout]:
    ring, layout = _as_coordinate_sequence(rows, measured)
    # closure is checked first: an open ring is reported as open whatever its length
    if ring and ring[0] != ring[-1]:
        raise UnclosedRing(f'Ring {index} is not closed: {ring[0]} != {ring[-1]}')
    if len(ring) < MIN_RING_SIZE:
        raise InsufficientCoordinates(f'Ring {index} has {len(ring)} coordinates, at least {MIN_RING_SIZE} are required')
    return ring, layout

def _as_rings(rings, measured: bool) -> tuple[tuple[CoordinateSequence, ...], CoordinateLayout]:
    if isinstance(rings, Polygon):
        return rings.coordinates, rings.layout
    try:
        rings = list(rings)
    except TypeError:
        raise InvalidCoordinateDimension(f'Expected a sequence of rings, got {rings!r}') from None
    if not rings:
        raise InsufficientCoordinates('A polygon needs at least an exterior ring')

    parsed = [_as_ring(ring, measured, index) for index, ring in enumerate(rings)]
    layout = _merge_layouts(layout for _, layout in parsed)
    return tuple(ring for ring, _ in parsed), layout

def _as_line(rows, measured: bool) -> tuple[CoordinateSequence, CoordinateLayout]:
    if isinstance(rows, LineString):
        return rows.coordinates, rows.layout
    line, layout = _as_coordinate_sequence(rows, measured)
    if len(line) < MIN_LINESTRING_SIZE:
        raise InsufficientCoordinates(f'A line string needs at least {MIN_LINESTRING_SIZE} coordinates, got {len(line)}')
    return line, layout

def _map_sequence(sequence: CoordinateSequence, layout: CoordinateLayout, mapper: SequenceMapper) -> CoordinateSequence:
    return tuple(tuple(coordinate) for coordinate in mapper(sequence, layout))


class GeometryValue:
    """Common behaviour of all geometry values."""

    kind: ClassVar[GeometryKind]

    @property
    def is_empty(self) -> bool:
        return next(self.iter_coordinates(), None) is None

    def iter_coordinates(self) -> Iterator[Coordinate]:
        raise NotImplementedError()

    def with_srid(self, srid: int | None) -> 'GeometryValue':
        raise NotImplementedError()

    def map_sequences(self, mapper: SequenceMapper, srid: int | None) -> 'GeometryValue':
        """Rebuild the value with every coordinate sequence passed through ``mapper``."""
        raise NotImplementedError()

    def _measured(self) -> bool:
        return self.layout is not None and self.layout.has_m


@dataclass(frozen=True)
class Point(GeometryValue):
    coordinates: Coordinate
    srid: int | None = None
    measured: InitVar[bool] = False
    layout: CoordinateLayout = field(init=False)

    kind: ClassVar[GeometryKind] = GeometryKind.POINT

    def __post_init__(self, measured: bool):
        coordinate, layout = _as_coordinate(self.coordinates, measured)
        object.__setattr__(self, 'coordinates', coordinate)
        object.__setattr__(self, 'layout', layout)

    @property
    def x(self) -> Number:
        return self.coordinates[0]

    @property
    def y(self) -> Number:
        return self.coordinates[1]

    def iter_coordinates(self) -> Iterator[Coordinate]:
        yield self.coordinates

    def with_srid(self, srid: int | None) -> 'Point':
        return replace(self, srid=srid, measured=self._measured())

    def map_sequences(self, mapper: SequenceMapper, srid: int | None) -> 'Point':
        (coordinate,) = _map_sequence((self.coordinates,), self.layout, mapper)
        return Point(coordinate, srid=srid, measured=self._measured())


@dataclass(frozen=True)
class MultiPoint(GeometryValue):
    coordinates: CoordinateSequence = ()
    srid: int | None = None
    measured: InitVar[bool] = False
    layout: CoordinateLayout | None = field(init=False)

    kind: ClassVar[GeometryKind] = GeometryKind.MULTIPOINT

    def __post_init__(self, measured: bool):
        coordinates, layout = _as_coordinate_sequence(self.coordinates, measured)
        object.__setattr__(self, 'coordinates', coordinates)
        object.__setattr__(self, 'layout', layout)

    @property
    def geoms(self) -> tuple[Point, ...]:
        return tuple(Point(coordinate, srid=self.srid, measured=self._measured()) for coordinate in self.coordinates)

    def __len__(self) -> int:
        return len(self.coordinates)

    def iter_coordinates(self) -> Iterator[Coordinate]:
        yield from self.coordinates

    def with_srid(self, srid: int | None) -> 'MultiPoint':
        return replace(self, srid=srid, measured=self._measured())

    def map_sequences(self, mapper: SequenceMapper, srid: int | None) -> 'MultiPoint':
        if not self.coordinates:
            return self.with_srid(srid)
        return MultiPoint(_map_sequence(self.coordinates, self.layout, mapper), srid=srid, measured=self._measured())


@dataclass(frozen=True)
class LineString(GeometryValue):
    coordinates: CoordinateSequence
    srid: int | None = None
    measured: InitVar[bool] = False
    layout: CoordinateLayout = field(init=False)

    kind: ClassVar[GeometryKind] = GeometryKind.LINESTRING

    def __post_init__(self, measured: bool):
        coordinates, layout = _as_line(self.coordinates, measured)
        object.__setattr__(self, 'coordinates', coordinates)
        object.__setattr__(self, 'layout', layout)

    def __len__(self) -> int:
        return len(self.coordinates)

    def iter_coordinates(self) -> Iterator[Coordinate]:
        yield from self.coordinates

    def with_srid(self, srid: int | None) -> 'LineString':
        return replace(self, srid=srid, measured=self._measured())

    def map_sequences(self, mapper: SequenceMapper, srid: int | None) -> 'LineString':
        return LineString(_map_sequence(self.coordinates, self.layout, mapper), srid=srid, measured=self._measured())


@dataclass(frozen=True)
class MultiLineString(GeometryValue):
    coordinates: tuple[CoordinateSequence, ...] = ()
    srid: int | None = None
    measured: InitVar[bool] = False
    layout: CoordinateLayout | None = field(init=False)

    kind: ClassVar[GeometryKind] = GeometryKind.MULTILINESTRING

    def __post_init__(self, measured: bool):
        parsed = [_as_line(line, measured) for line in self.coordinates]
        object.__setattr__(self, 'coordinates', tuple(line for line, _ in parsed))
        object.__setattr__(self, 'layout', _merge_layouts(layout for _, layout in parsed))

    @property
    def geoms(self) -> tuple[LineString, ...]:
        return tuple(LineString(line, srid=self.srid, measured=self._measured()) for line in self.coordinates)

    def __len__(self) -> int:
        return len(self.coordinates)

    def iter_coordinates(self) -> Iterator[Coordinate]:
        for line in self.coordinates:
            yield from line

    def with_srid(self, srid: int | None) -> 'MultiLineString':
        return replace(self, srid=srid, measured=self._measured())

    def map_sequences(self, mapper: SequenceMapper, srid: int | None) -> 'MultiLineString':
        return MultiLineString(
            tuple(_map_sequence(line, self.layout, mapper) for line in self.coordinates),
            srid=srid,
            measured=self._measured(),
        )


@dataclass(frozen=True)
class Polygon(GeometryValue):
    coordinates: tuple[CoordinateSequence, ...]
    srid: int | None = None
    measured: InitVar[bool] = False
    layout: CoordinateLayout = field(init=False)

    kind: ClassVar[GeometryKind] = GeometryKind.POLYGON

    def __post_init__(self, measured: bool):
        rings, layout = _as_rings(self.coordinates, measured)
        object.__setattr__(self, 'coordinates', rings)
        object.__setattr__(self, 'layout', layout)

    @property
    def exterior(self) -> CoordinateSequence:
        return self.coordinates[0]

    @property
    def interiors(self) -> tuple[CoordinateSequence, ...]:
        return self.coordinates[1:]

    def iter_coordinates(self) -> Iterator[Coordinate]:
        for ring in self.coordinates:
            yield from ring

    def with_srid(self, srid: int | None) -> 'Polygon':
        return replace(self, srid=srid, measured=self._measured())

    def map_sequences(self, mapper: SequenceMapper, srid: int | None) -> 'Polygon':
        return Polygon(
            tuple(_map_sequence(ring, self.layout, mapper) for ring in self.coordinates),
            srid=srid,
            measured=self._measured(),
        )


@dataclass(frozen=True)
class MultiPolygon(GeometryValue):
    coordinates: tuple[tuple[CoordinateSequence, ...], ...] = ()
    srid: int | None = None
    measured: InitVar[bool] = False
    layout: CoordinateLayout | None = field(init=False)

    kind: ClassVar[GeometryKind] = GeometryKind.MULTIPOLYGON

    def __post_init__(self, measured: bool):
        parsed = [_as_rings(polygon, measured) for polygon in self.coordinates]
        object.__setattr__(self, 'coordinates', tuple(rings for rings, _ in parsed))
        object.__setattr__(self, 'layout', _merge_layouts(layout for _, layout in parsed))

    @property
    def geoms(self) -> tuple[Polygon, ...]:
        return tuple(Polygon(rings, srid=self.srid, measured=self._measured()) for rings in self.coordinates)

    def __len__(self) -> int:
        return len(self.coordinates)

    def iter_coordinates(self) -> Iterator[Coordinate]:
        for rings in self.coordinates:
            for ring in rings:
                yield from ring

    def with_srid(self, srid: int | None) -> 'MultiPolygon':
        return replace(self, srid=srid, measured=self._measured())

    def map_sequences(self, mapper: SequenceMapper, srid: int | None) -> 'MultiPolygon':
        return MultiPolygon(
            tuple(
                tuple(_map_sequence(ring, self.layout, mapper) for ring in rings)
                for rings in self.coordinates
            ),
            srid=srid,
            measured=self._measured(),
        )


@dataclass(frozen=True)
class GeometryCollection(GeometryValue):
    """Ordered, possibly heterogeneous container. Members are addressed by position only."""

    members: tuple[GeometryValue, ...] = ()
    srid: int | None = None

    kind: ClassVar[GeometryKind] = GeometryKind.GEOMETRYCOLLECTION

    def __post_init__(self):
        members = tuple(self.members)
        for index, member in enumerate(members):
            if not isinstance(member, GeometryValue):
                raise TypeError(f'Collection member {index} is not a geometry: {member!r}')
        object.__setattr__(self, 'members', members)

    @property
    def geoms(self) -> tuple[GeometryValue, ...]:
        return self.members

    @property
    def layout(self) -> CoordinateLayout | None:
        """Layout shared by every member. Raises ``InconsistentDimensionality`` on a mix."""
        return _merge_layouts(member.layout for member in self.members)

    @property
    def is_empty(self) -> bool:
        return not self.members

    def __len__(self) -> int:
        return len(self.members)

    def __iter__(self) -> Iterator[GeometryValue]:
        return iter(self.members)

    def __getitem__(self, index: int) -> GeometryValue:
        return self.members[index]

    def iter_coordinates(self) -> Iterator[Coordinate]:
        for member in self.members:
            yield from member.iter_coordinates()

    def with_srid(self, srid: int | None) -> 'GeometryCollection':
        return replace(self, srid=srid)

    def map_sequences(self, mapper: SequenceMapper, srid: int | None) -> 'GeometryCollection':
        return GeometryCollection(tuple(member.map_sequences(mapper, srid) for member in self.members), srid=srid)

    def _measured(self) -> bool:
        return False


GEOMETRY_TYPES: dict[GeometryKind, type[GeometryValue]] = {
    GeometryKind.POINT: Point,
    GeometryKind.MULTIPOINT: MultiPoint,
    GeometryKind.LINESTRING: LineString,
    GeometryKind.MULTILINESTRING: MultiLineString,
    GeometryKind.POLYGON: Polygon,
    GeometryKind.MULTIPOLYGON: MultiPolygon,
    GeometryKind.GEOMETRYCOLLECTION: GeometryCollection,
}
