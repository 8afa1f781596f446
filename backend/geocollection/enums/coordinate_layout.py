from enum import Enum


class CoordinateLayout(Enum):
    XY = 'XY'
    XYZ = 'XYZ'
    XYM = 'XYM'
    XYZM = 'XYZM'

    @property
    def has_z(self) -> bool:
        return 'Z' in self.value

    @property
    def has_m(self) -> bool:
        return 'M' in self.value

    @property
    def wkt_suffix(self) -> str:
        # ISO WKT dimension tag, e.g. POINT Z (...)
        return self.value[2:]

    @classmethod
    def from_size(cls, size: int, measured: bool = False) -> 'CoordinateLayout':
        if size == 2:
            return cls.XY
        if size == 3:
            return cls.XYM if measured else cls.XYZ
        if size == 4:
            return cls.XYZM
        raise ValueError(f'Unsupported coordinate size: {size}')
