import logging

from smx.crypto_utils import bytes_to_hex, constant_time_equal, hex_to_bytes, xor_bytes
from smx.ec.curve import Curve
from smx.ec.point import Point
from smx.exceptions import DecryptionError, InvalidArgumentError
from smx.sm2.kdf import kdf
from smx.sm2.keygen import decode_point, decode_private_key, new_key_pair
from smx.sm2.types import C1_HEX_LENGTH, C3_HEX_LENGTH
from smx.sm3.hashing import SM3

logger = logging.getLogger(__name__)


def _c3(p2: Point, message: bytes) -> bytes:
    return SM3().update(p2.x.to_bytes()).update(message).update(p2.y.to_bytes()).finish()


def encrypt(curve: Curve, public_key: Point | bytes | str, plaintext: bytes) -> str:
    """
    SM2 public-key encryption. Returns hex C1 || C3 || C2 where C1 is the
    uncompressed ephemeral point, C3 = SM3(x2 || M || y2) and C2 = M xor KDF.
    """
    if not public_key:
        raise InvalidArgumentError("Public key is empty")
    if not plaintext:
        raise InvalidArgumentError("Plaintext is empty")
    q = public_key if isinstance(public_key, Point) else decode_point(curve, public_key)
    if q.is_infinity or not q.is_valid():
        raise InvalidArgumentError("Invalid public key")

    while True:
        ephemeral = new_key_pair(curve)
        p2 = q.multiply(ephemeral.private_key)
        if p2.is_infinity:
            continue
        keystream = kdf(len(plaintext), p2)
        if not any(keystream):
            logger.debug("All-zero keystream, drawing a new ephemeral key")
            continue
        break

    c1 = ephemeral.public_key.encode()
    c2 = xor_bytes(plaintext, keystream)
    c3 = _c3(p2, plaintext)
    return bytes_to_hex(c1) + bytes_to_hex(c3) + bytes_to_hex(c2)


def decrypt(curve: Curve, private_key: int | bytes | str, ciphertext: str) -> bytes:
    if not ciphertext:
        raise InvalidArgumentError("Ciphertext is empty")
    d = decode_private_key(curve, private_key)

    data = ciphertext.strip()
    if len(data) <= C1_HEX_LENGTH + C3_HEX_LENGTH:
        raise InvalidArgumentError("Ciphertext is too short")
    c1 = curve.decode_point(hex_to_bytes(data[:C1_HEX_LENGTH]))
    c3 = hex_to_bytes(data[C1_HEX_LENGTH : C1_HEX_LENGTH + C3_HEX_LENGTH])
    c2 = hex_to_bytes(data[C1_HEX_LENGTH + C3_HEX_LENGTH :])

    p2 = c1.multiply(d)
    if p2.is_infinity:
        raise DecryptionError("Decryption failed")
    plaintext = xor_bytes(c2, kdf(len(c2), p2))
    if not constant_time_equal(_c3(p2, plaintext), c3):
        logger.warning("SM2 ciphertext failed its C3 check")
        raise DecryptionError("Decryption failed")
    return plaintext
