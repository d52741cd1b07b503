import logging
import re

from smx.config import SIGNATURE_SEPARATOR
from smx.crypto_utils import int_from_bytes
from smx.ec.curve import Curve
from smx.ec.point import Point
from smx.exceptions import InvalidArgumentError, SMXError
from smx.sm2.kdf import user_z
from smx.sm2.keygen import decode_private_key, decode_public_key, new_key_pair
from smx.sm3.hashing import SM3

logger = logging.getLogger(__name__)

SIGNATURE_HEX_LENGTH = 64

# Plain hex digits only: no sign, prefix, separator or whitespace
SIGNATURE_PART = re.compile(r"[0-9a-fA-F]{1,64}")


def message_digest(curve: Curve, user_id: bytes, public_key: Point, message: bytes) -> int:
    """e = SM3(Z || M) as an unsigned integer."""
    z = user_z(curve, user_id, public_key)
    return int_from_bytes(SM3().update(z).update(message).finish())


def _full_width(value: int) -> bool:
    return len(format(value, "x")) == SIGNATURE_HEX_LENGTH


def sign(curve: Curve, user_id: bytes, private_key: int | bytes | str, message: bytes) -> str:
    """
    SM2 signature over message, bound to user_id. Returns "<r hex>h<s hex>".

    Ephemeral keys are redrawn until r and s are non-zero and encode to
    exactly 64 hex digits each.
    """
    n = curve.n
    d = decode_private_key(curve, private_key)
    if d == n - 1:
        raise InvalidArgumentError("Private key is out of range")
    e = message_digest(curve, user_id, curve.g.multiply(d), message)
    d1_inv = pow(1 + d, -1, n)

    while True:
        ephemeral = new_key_pair(curve)
        k = ephemeral.private_key
        r = (e + ephemeral.public_key.x.value) % n
        if r == 0 or r + k == n or not _full_width(r):
            continue
        s = (d1_inv * (k - r * d)) % n
        if s == 0 or not _full_width(s):
            continue
        return f"{r:064x}{SIGNATURE_SEPARATOR}{s:064x}"


def parse_signature(signature: str) -> tuple[int, int]:
    parts = signature.split(SIGNATURE_SEPARATOR)
    if len(parts) != 2 or not all(SIGNATURE_PART.fullmatch(part) for part in parts):
        raise InvalidArgumentError("Malformed signature")
    return int(parts[0], 16), int(parts[1], 16)


def verify(
    curve: Curve,
    user_id: bytes,
    public_key: Point | bytes | str,
    message: bytes,
    signature: str,
) -> bool:
    """Check an SM2 signature. Malformed input yields False, never an exception."""
    n = curve.n
    try:
        q = public_key if isinstance(public_key, Point) else decode_public_key(curve, public_key)
        if q.is_infinity or not q.is_valid():
            return False
        r, s = parse_signature(signature)
        if not (1 <= r < n and 1 <= s < n):
            return False
        e = message_digest(curve, user_id, q, message)
        t = (r + s) % n
        if t == 0:
            return False
        point = curve.g.multiply(s).add(q.multiply(t))
        if point.is_infinity:
            return False
        return (e + point.x.value) % n == r
    except (SMXError, ValueError, ArithmeticError) as e:
        logger.debug("Signature rejected: %s", e)
        return False
