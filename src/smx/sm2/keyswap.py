"""
SM2 authenticated key exchange (GB/T 32918.3) with key confirmation.

Roles follow the standard: A is the initiator, B the responder.

    B: get_sb(...)  -> V, Za, Zb, Kb, Sb      (Sb sent to A)
    A: get_sa(...)  -> verifies Sb, Ka, Sa    (Sa sent to B)
    B: check_sa(...) -> bool

Protocol failures are returned as KeySwapFailure, never raised.
"""

import logging

from smx.crypto_utils import constant_time_equal
from smx.ec.curve import Curve
from smx.ec.point import Point
from smx.exceptions import InvalidPointError, SMXError
from smx.sm2.kdf import kdf, user_z
from smx.sm2.types import (
    TAG_INITIATOR,
    TAG_RESPONDER,
    InitiatorExchange,
    KeySwapFailure,
    ResponderExchange,
)
from smx.sm3.hashing import SM3

logger = logging.getLogger(__name__)


def truncate_x(w: int, x: int) -> int:
    """x̄ = 2^w + (x mod 2^w)."""
    two_w = 1 << w
    return two_w + (x & (two_w - 1))


def confirmation_tag(
    tag: int, vu: Point, za: bytes, zb: bytes, ra: Point, rb: Point
) -> bytes:
    """S = SM3(tag || y || SM3(x || Za || Zb || Ra.x || Ra.y || Rb.x || Rb.y))."""
    inner = (
        SM3()
        .update(vu.x.to_bytes())
        .update(za)
        .update(zb)
        .update(ra.x.to_bytes())
        .update(ra.y.to_bytes())
        .update(rb.x.to_bytes())
        .update(rb.y.to_bytes())
        .finish()
    )
    return SM3().update(bytes([tag])).update(vu.y.to_bytes()).update(inner).finish()


def _shared_point(
    curve: Curve, d: int, r: int, own_ephemeral: Point, peer_public: Point, peer_ephemeral: Point
) -> Point:
    """(d + x̄_own * r) * (P_peer + x̄_peer * R_peer)."""
    t = (d + truncate_x(curve.w, own_ephemeral.x.value) * r) % curve.n
    x_peer = truncate_x(curve.w, peer_ephemeral.x.value)
    return peer_public.add(peer_ephemeral.multiply(x_peer)).multiply(t)


def _require_on_curve(curve: Curve, point: Point, message: str) -> None:
    if point.curve != curve or point.is_infinity or not point.is_valid():
        raise InvalidPointError(message)


def get_sb(
    curve: Curve,
    klen: int,
    pa: Point,
    ra: Point,
    pb: Point,
    db: int,
    rb: Point,
    rb_private: int,
    id_a: str,
    id_b: str,
) -> ResponderExchange | KeySwapFailure:
    try:
        _require_on_curve(
            curve, ra, "Key exchange failed: A's random public key is not on the curve."
        )
        v = _shared_point(curve, db, rb_private, rb, pa, ra)
        if v.is_infinity:
            raise InvalidPointError("Key exchange failed: V is at infinity.")
        za = user_z(curve, id_a.encode("utf-8"), pa)
        zb = user_z(curve, id_b.encode("utf-8"), pb)
        kb = kdf(klen, v, za, zb)
        sb = confirmation_tag(TAG_RESPONDER, v, za, zb, ra, rb)
    except SMXError as e:
        logger.warning("Responder key exchange failed: %s", e)
        return KeySwapFailure(message=str(e))
    logger.debug("Responder derived %d bytes of key material", klen)
    return ResponderExchange(v=v, za=za, zb=zb, kb=kb, sb=sb)


def get_sa(
    curve: Curve,
    klen: int,
    pb: Point,
    rb: Point,
    pa: Point,
    da: int,
    ra: Point,
    ra_private: int,
    id_a: str,
    id_b: str,
    sb: bytes,
) -> InitiatorExchange | KeySwapFailure:
    try:
        _require_on_curve(
            curve, rb, "Key exchange failed: B's random public key is not on the curve."
        )
        u = _shared_point(curve, da, ra_private, ra, pb, rb)
        if u.is_infinity:
            raise InvalidPointError("Key exchange failed: U is at infinity.")
        za = user_z(curve, id_a.encode("utf-8"), pa)
        zb = user_z(curve, id_b.encode("utf-8"), pb)
        ka = kdf(klen, u, za, zb)
        s1 = confirmation_tag(TAG_RESPONDER, u, za, zb, ra, rb)
        if not constant_time_equal(s1, sb):
            return KeySwapFailure(
                message="Key exchange failed: B's verification value does not match."
            )
        sa = confirmation_tag(TAG_INITIATOR, u, za, zb, ra, rb)
    except SMXError as e:
        logger.warning("Initiator key exchange failed: %s", e)
        return KeySwapFailure(message=str(e))
    logger.debug("Initiator verified Sb and derived %d bytes of key material", klen)
    return InitiatorExchange(u=u, za=za, zb=zb, ka=ka, sa=sa)


def check_sa(
    curve: Curve, v: Point, za: bytes, zb: bytes, ra: Point, rb: Point, sa: bytes
) -> bool:
    try:
        curve.check_points([v, ra, rb])
        s2 = confirmation_tag(TAG_INITIATOR, v, za, zb, ra, rb)
    except SMXError:
        return False
    return constant_time_equal(s2, sa)
