import logging

from smx.crypto_utils import hex_to_bytes, int_from_bytes, minimal_length, random_bits
from smx.ec.curve import Curve
from smx.ec.point import UNCOMPRESSED_TAG, Point
from smx.exceptions import InvalidArgumentError
from smx.sm2.types import KEY_SIZE, KeyPair
from smx.util import naf_weight

logger = logging.getLogger(__name__)


def random_scalar(curve: Curve) -> int:
    """
    Draw d with 2 <= d < n whose NAF weight is at least bitlen(n) / 4.

    Low-weight scalars are rejected and redrawn.
    """
    n = curve.n
    bits = n.bit_length()
    min_weight = bits >> 2
    while True:
        d = random_bits(bits)
        if d < 2 or d >= n or naf_weight(d) < min_weight:
            continue
        return d


def key_pair_from_private(curve: Curve, d: int) -> KeyPair:
    return KeyPair(public_key=public_key_from_private(curve, d), private_key=d)


def new_key_pair(curve: Curve) -> KeyPair:
    """One key pair with no constraint on encoded lengths (ephemeral use)."""
    return key_pair_from_private(curve, random_scalar(curve))


def has_full_width(key_pair: KeyPair) -> bool:
    q = key_pair.public_key
    return (
        minimal_length(key_pair.private_key) == KEY_SIZE
        and minimal_length(q.x.value) + minimal_length(q.y.value) == 2 * KEY_SIZE
    )


def generate_key_pair(curve: Curve) -> KeyPair:
    """
    Key pair whose private scalar and public coordinates have no leading
    zero byte: d encodes to 32 bytes and X, Y to 64 bytes together.
    """
    attempts = 0
    while True:
        attempts += 1
        key_pair = new_key_pair(curve)
        if has_full_width(key_pair):
            logger.debug("Generated key pair after %d draw(s)", attempts)
            return key_pair


def public_key_from_private(curve: Curve, d: int) -> Point:
    return curve.g.multiply(d)


def decode_point(curve: Curve, encoded: bytes | str) -> Point:
    """Strictly decode 04 || X || Y, given as hex or bytes."""
    raw = hex_to_bytes(encoded) if isinstance(encoded, str) else bytes(encoded)
    return curve.decode_point(raw)


def decode_public_key(curve: Curve, public_key: bytes | str) -> Point:
    """
    Like decode_point, but also accepts a bare X || Y. Only signature
    verification takes keys in that form.
    """
    raw = hex_to_bytes(public_key) if isinstance(public_key, str) else bytes(public_key)
    if len(raw) == 2 * curve.field_bytes:
        raw = bytes([UNCOMPRESSED_TAG]) + raw
    return curve.decode_point(raw)


def decode_private_key(curve: Curve, private_key: bytes | str | int) -> int:
    """Private scalar from int, raw bytes or hex; 2 <= d < n like KeyPair."""
    if isinstance(private_key, int):
        d = private_key
    else:
        raw = hex_to_bytes(private_key) if isinstance(private_key, str) else bytes(private_key)
        if not raw:
            raise InvalidArgumentError("Private key is empty")
        d = int_from_bytes(raw)
    if not 2 <= d < curve.n:
        raise InvalidArgumentError("Private key is out of range")
    return d
