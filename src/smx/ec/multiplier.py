from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from smx.ec.point import Point
from smx.exceptions import CurveInvariantError, InvalidArgumentError

if TYPE_CHECKING:
    from smx.ec.curve import Curve

logger = logging.getLogger(__name__)


class CombPrecomputation(BaseModel):  # type: ignore
    """Lookup table for one base point."""

    width: int
    table: list[Point]
    offset: Point

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)


def comb_size(curve: Curve) -> int:
    order = curve.order
    return order.bit_length() if order else curve.field_size


def comb_width(bits: int) -> int:
    return 6 if bits > 256 else 5


class CombMultiplier:
    """
    Fixed-window comb scalar multiplication.

    The scalar is split into `width` rows of `d` bits. table[i] holds
    P + sum(2^(j*d) * P for every bit j set in i), so every column costs a
    single twice_plus. The extra (2^d - 1) * P that the constant P term adds
    is removed at the end by the offset point P - 2^d * P.
    """

    def precompute(self, p: Point) -> CombPrecomputation:
        curve = p.curve
        bits = comb_size(curve)
        width = comb_width(bits)
        d = (bits + width - 1) // width

        pow2 = [p]
        for _ in range(1, width):
            pow2.append(pow2[-1].times_pow2(d))
        offset = pow2[0].subtract(pow2[1])
        curve.check_points(pow2 + [offset])

        size = 1 << width
        table: list[Point | None] = [None] * size
        table[0] = pow2[0]
        for bit in range(width - 1, -1, -1):
            step = 1 << bit
            for i in range(step, size, step << 1):
                table[i] = table[i - step].add(pow2[bit])  # type: ignore[union-attr]
        curve.check_points(table)

        return CombPrecomputation(width=width, table=table, offset=offset)

    def multiply(self, p: Point, k: int) -> Point:
        if k == 0 or p.is_infinity:
            return p.curve.infinity
        positive = self._multiply_positive(p, abs(k))
        result = positive if k > 0 else positive.negate()
        if not result.is_valid():
            logger.error("Scalar multiplication left the curve")
            raise CurveInvariantError("Invalid EC point")
        return result

    def _multiply_positive(self, p: Point, k: int) -> Point:
        curve = p.curve
        size = comb_size(curve)
        if k.bit_length() > size:
            raise InvalidArgumentError("Scalar is wider than the curve order")

        info = self.precompute(p)
        width = info.width
        d = (size + width - 1) // width
        top = d * width - 1

        q = curve.infinity
        for i in range(d):
            idx = 0
            for j in range(top - i, -1, -d):
                idx = (idx << 1) | ((k >> j) & 1)
            q = q.twice_plus(info.table[idx])
        return q.add(info.offset)
