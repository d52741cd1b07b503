from typing import Self

from smx.crypto_utils import int_to_bytes
from smx.util import modinv


class FieldElement:
    """Immutable element of the prime field GF(p)."""

    __slots__ = ("_value", "_p")

    def __init__(self, value: int, p: int) -> None:
        if value < 0 or value >= p:
            raise ValueError("Field element out of range")
        self._value = value
        self._p = p

    @property
    def value(self) -> int:
        return self._value

    @property
    def p(self) -> int:
        return self._p

    @property
    def field_size(self) -> int:
        return self._p.bit_length()

    def _new(self, value: int) -> Self:
        return type(self)(value % self._p, self._p)

    def _check(self, other: "FieldElement") -> None:
        if other._p != self._p:
            raise ValueError("Field elements belong to different fields")

    def add(self, other: "FieldElement") -> Self:
        self._check(other)
        return self._new(self._value + other._value)

    def subtract(self, other: "FieldElement") -> Self:
        self._check(other)
        return self._new(self._value - other._value)

    def multiply(self, other: "FieldElement") -> Self:
        self._check(other)
        return self._new(self._value * other._value)

    def divide(self, other: "FieldElement") -> Self:
        self._check(other)
        return self._new(self._value * modinv(other._value, self._p))

    def negate(self) -> Self:
        return self._new(-self._value)

    def square(self) -> Self:
        return self._new(self._value * self._value)

    def invert(self) -> Self:
        return self._new(modinv(self._value, self._p))

    def is_zero(self) -> bool:
        return self._value == 0

    def is_one(self) -> bool:
        return self._value == 1

    def to_bytes(self) -> bytes:
        """Fixed-width big-endian encoding, (field_size + 7) // 8 bytes."""
        return int_to_bytes(self._value, (self.field_size + 7) // 8)

    __add__ = add
    __sub__ = subtract
    __mul__ = multiply
    __truediv__ = divide
    __neg__ = negate

    def __int__(self) -> int:
        return self._value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldElement):
            return NotImplemented
        return self._value == other._value and self._p == other._p

    def __hash__(self) -> int:
        return hash((self._value, self._p))

    def __repr__(self) -> str:
        return f"FieldElement({self._value:#x})"
