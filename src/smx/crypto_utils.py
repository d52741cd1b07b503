import binascii
import secrets
from typing import TypeAlias

from nacl.bindings import sodium_memcmp

from smx.exceptions import InvalidArgumentError

HexString: TypeAlias = str
SymmetricKey: TypeAlias = bytes


def int_from_bytes(b: bytes) -> int:
    return int.from_bytes(b, "big")


def int_to_bytes(i: int, length: int = 32) -> bytes:
    return i.to_bytes(length, "big")


def minimal_length(i: int) -> int:
    """Byte length of the shortest unsigned big-endian encoding of i."""
    return (i.bit_length() + 7) // 8


def hex_to_bytes(value: str) -> bytes:
    try:
        return binascii.unhexlify(value.strip())
    except (binascii.Error, ValueError) as e:
        raise InvalidArgumentError(f"Invalid hex string: {value!r}") from e


def bytes_to_hex(data: bytes) -> HexString:
    return data.hex()


def xor_bytes(a: bytes, b: bytes) -> bytes:
    return bytes(x ^ y for x, y in zip(a, b))


def random_bits(bits: int) -> int:
    return secrets.randbits(bits)


def constant_time_equal(a: bytes, b: bytes) -> bool:
    return sodium_memcmp(bytes(a), bytes(b))  # type: ignore
