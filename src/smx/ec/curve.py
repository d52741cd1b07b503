from collections.abc import Iterable

from smx.crypto_utils import int_from_bytes
from smx.ec.field import FieldElement
from smx.ec.multiplier import CombMultiplier
from smx.ec.point import UNCOMPRESSED_TAG, Point
from smx.exceptions import InvalidArgumentError, InvalidPointError


class Curve:
    """
    Domain parameters of a prime-field curve y^2 = x^3 + ax + b (mod p).

    A Curve is built once and handed to every component that needs it.
    It owns the point factory, the point decoder, and the scalar multiplier
    used by Point.multiply.
    """

    def __init__(
        self,
        p: int,
        a: int,
        b: int,
        n: int,
        gx: int,
        gy: int,
        h: int = 1,
        multiplier: CombMultiplier | None = None,
        name: str = "",
    ) -> None:
        self._p = p
        self._n = n
        self._h = h
        self.name = name
        self._a = self.from_int(a)
        self._b = self.from_int(b)
        self._multiplier = multiplier if multiplier is not None else CombMultiplier()
        self._infinity = Point(self, None, None)
        self._g = self.validate_point(gx, gy)

    @property
    def p(self) -> int:
        return self._p

    @property
    def a(self) -> FieldElement:
        return self._a

    @property
    def b(self) -> FieldElement:
        return self._b

    @property
    def n(self) -> int:
        return self._n

    @property
    def order(self) -> int:
        return self._n

    @property
    def cofactor(self) -> int:
        return self._h

    @property
    def g(self) -> Point:
        return self._g

    @property
    def infinity(self) -> Point:
        return self._infinity

    @property
    def multiplier(self) -> CombMultiplier:
        return self._multiplier

    @property
    def field_size(self) -> int:
        return self._p.bit_length()

    @property
    def field_bytes(self) -> int:
        return (self.field_size + 7) // 8

    @property
    def w(self) -> int:
        """ceil(bitlen(n) / 2) - 1, the truncation width of the key exchange."""
        return (self._n.bit_length() + 1) // 2 - 1

    def from_int(self, x: int) -> FieldElement:
        if x < 0 or x >= self._p:
            raise InvalidPointError("Coordinate is not a field element")
        return FieldElement(x, self._p)

    def create_point(self, x: int, y: int) -> Point:
        return Point(self, self.from_int(x), self.from_int(y))

    def validate_point(self, x: int, y: int) -> Point:
        point = self.create_point(x, y)
        if not point.is_valid():
            raise InvalidPointError("Point is not on the curve")
        return point

    def decode_point(self, encoded: bytes) -> Point:
        size = self.field_bytes
        if len(encoded) != 2 * size + 1:
            raise InvalidArgumentError("Invalid point encoding length")
        if encoded[0] != UNCOMPRESSED_TAG:
            raise InvalidArgumentError("Only uncompressed point encoding is supported")
        x = int_from_bytes(encoded[1 : 1 + size])
        y = int_from_bytes(encoded[1 + size :])
        point = self.validate_point(x, y)
        if point.is_infinity:
            raise InvalidPointError("Point is at infinity")
        return point

    def check_points(self, points: Iterable[Point | None]) -> None:
        for point in points:
            if point is not None and point.curve != self:
                raise InvalidPointError("Point is not on this curve")

    def _params(self) -> tuple[int, int, int, int, int, int]:
        g = self._g
        return (self._p, self._a.value, self._b.value, self._n, g.x.value, g.y.value)

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Curve):
            return NotImplemented
        return self._params() == other._params()

    def __hash__(self) -> int:
        return hash(self._params())

    def __repr__(self) -> str:
        return f"Curve({self.name or hex(self._p)})"
