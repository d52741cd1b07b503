from smx.ec.curve import Curve
from smx.ec.point import Point
from smx.exceptions import InvalidArgumentError
from smx.sm3.hashing import DIGEST_SIZE, SM3

MAX_ID_BITS = 0xFFFF


def user_z(curve: Curve, user_id: bytes, public_key: Point) -> bytes:
    """
    Z = SM3(ENTL || ID || a || b || Gx || Gy || Px || Py).

    ENTL is the bit length of ID as a 16-bit big-endian integer.
    """
    entl = len(user_id) * 8
    if entl > MAX_ID_BITS:
        raise InvalidArgumentError("User id is too long")
    h = SM3()
    h.update(entl.to_bytes(2, "big"))
    h.update(user_id)
    h.update(curve.a.to_bytes())
    h.update(curve.b.to_bytes())
    h.update(curve.g.x.to_bytes())
    h.update(curve.g.y.to_bytes())
    h.update(public_key.x.to_bytes())
    h.update(public_key.y.to_bytes())
    return h.finish()


def kdf(klen: int, point: Point, za: bytes | None = None, zb: bytes | None = None) -> bytes:
    """
    klen bytes of key material: SM3(x || y [|| Za] [|| Zb] || ct) for ct = 1, 2, ...
    """
    if klen <= 0:
        raise InvalidArgumentError("Key length must be positive")
    seed = point.x.to_bytes() + point.y.to_bytes()
    if za is not None:
        seed += za
    if zb is not None:
        seed += zb

    out = bytearray()
    h = SM3()
    for ct in range(1, (klen + DIGEST_SIZE - 1) // DIGEST_SIZE + 1):
        out += h.update(seed).update(ct.to_bytes(4, "big")).finish()
    return bytes(out[:klen])
