from __future__ import annotations

from typing import TYPE_CHECKING

from smx.ec.field import FieldElement
from smx.exceptions import InvalidPointError

if TYPE_CHECKING:
    from smx.ec.curve import Curve

UNCOMPRESSED_TAG = 0x04


class Point:
    """
    Affine point on a short Weierstrass curve y^2 = x^3 + ax + b over GF(p).

    The point at infinity carries no coordinates. Points are immutable and
    always remember the curve that created them.
    """

    __slots__ = ("_curve", "_x", "_y")

    def __init__(self, curve: Curve, x: FieldElement | None, y: FieldElement | None) -> None:
        if (x is None) != (y is None):
            raise InvalidPointError("Exactly one coordinate is missing")
        self._curve = curve
        self._x = x
        self._y = y

    @property
    def curve(self) -> Curve:
        return self._curve

    @property
    def is_infinity(self) -> bool:
        return self._x is None

    @property
    def x(self) -> FieldElement:
        if self._x is None:
            raise InvalidPointError("Point at infinity has no coordinates")
        return self._x

    @property
    def y(self) -> FieldElement:
        if self._y is None:
            raise InvalidPointError("Point at infinity has no coordinates")
        return self._y

    def is_valid(self) -> bool:
        """Check y^2 == x^3 + ax + b. The point at infinity is valid."""
        if self.is_infinity:
            return True
        x, y = self.x, self.y
        lhs = y.square()
        rhs = x.square().multiply(x).add(self._curve.a.multiply(x)).add(self._curve.b)
        return lhs == rhs

    def _check_curve(self, other: Point) -> None:
        if other._curve != self._curve:
            raise InvalidPointError("Point is not on this curve")

    def negate(self) -> Point:
        if self.is_infinity:
            return self
        return Point(self._curve, self.x, self.y.negate())

    def add(self, other: Point) -> Point:
        self._check_curve(other)
        if self.is_infinity:
            return other
        if other.is_infinity:
            return self

        x1, y1, x2, y2 = self.x, self.y, other.x, other.y
        if x1 == x2:
            if y1 == y2:
                return self.twice()
            return self._curve.infinity

        lam = y2.subtract(y1).divide(x2.subtract(x1))
        x3 = lam.square().subtract(x1).subtract(x2)
        y3 = lam.multiply(x1.subtract(x3)).subtract(y1)
        return Point(self._curve, x3, y3)

    def subtract(self, other: Point) -> Point:
        return self.add(other.negate())

    def twice(self) -> Point:
        if self.is_infinity:
            return self
        x1, y1 = self.x, self.y
        if y1.is_zero():
            return self._curve.infinity

        three_x_sq = x1.square()
        three_x_sq = three_x_sq.add(three_x_sq).add(three_x_sq)
        lam = three_x_sq.add(self._curve.a).divide(y1.add(y1))
        x3 = lam.square().subtract(x1.add(x1))
        y3 = lam.multiply(x1.subtract(x3)).subtract(y1)
        return Point(self._curve, x3, y3)

    def twice_plus(self, other: Point) -> Point:
        """2 * self + other."""
        return self.twice().add(other)

    def times_pow2(self, e: int) -> Point:
        """2^e * self by repeated doubling."""
        if e < 0:
            raise ValueError("Exponent cannot be negative")
        p = self
        for _ in range(e):
            if p.is_infinity:
                break
            p = p.twice()
        return p

    def multiply(self, k: int) -> Point:
        return self._curve.multiplier.multiply(self, k)

    def encode(self) -> bytes:
        """Uncompressed encoding 04 || X || Y."""
        if self.is_infinity:
            raise InvalidPointError("Cannot encode the point at infinity")
        return bytes([UNCOMPRESSED_TAG]) + self.x.to_bytes() + self.y.to_bytes()

    def encode_hex(self) -> str:
        return self.encode().hex()

    __add__ = add
    __sub__ = subtract
    __neg__ = negate

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Point):
            return NotImplemented
        if self.is_infinity or other.is_infinity:
            return self.is_infinity and other.is_infinity
        return self._x == other._x and self._y == other._y and self._curve == other._curve

    def __hash__(self) -> int:
        if self.is_infinity:
            return hash(None)
        return hash((self.x.value, self.y.value))

    def __repr__(self) -> str:
        if self.is_infinity:
            return "Point(infinity)"
        return f"Point(x={self.x.value:#x}, y={self.y.value:#x})"
