from smx.config import DEFAULT_USER_ID
from smx.ec.curve import Curve
from smx.ec.point import Point
from smx.sm2 import cipher, keyswap, signature
from smx.sm2.keygen import (
    decode_point,
    decode_private_key,
    generate_key_pair,
    public_key_from_private,
)
from smx.sm2.params import sm2_curve
from smx.sm2.types import (
    InitiatorExchange,
    KeyPair,
    KeySwapFailure,
    ResponderExchange,
)


class SM2:
    """
    String-oriented SM2 facade: keys and ciphertexts travel as hex,
    messages and identities as UTF-8 text.
    """

    def __init__(self, curve: Curve | None = None) -> None:
        self.curve = curve if curve is not None else sm2_curve()

    def gen_key_pair(self) -> KeyPair:
        return generate_key_pair(self.curve)

    def decode_point(self, encoded: str) -> Point:
        return decode_point(self.curve, encoded)

    def get_public_key(self, private_key_hex: str) -> Point:
        d = decode_private_key(self.curve, private_key_hex)
        return public_key_from_private(self.curve, d)

    def encrypt(self, plaintext: str, public_key_hex: str) -> str:
        return cipher.encrypt(self.curve, public_key_hex, plaintext.encode("utf-8"))

    def decrypt(self, ciphertext: str, private_key_hex: str) -> str:
        return cipher.decrypt(self.curve, private_key_hex, ciphertext).decode("utf-8")

    def sign(self, user_id: str | None, content: str, private_key_hex: str) -> str:
        return signature.sign(
            self.curve, _id(user_id), private_key_hex, content.encode("utf-8")
        )

    def verify(
        self, user_id: str | None, sig: str, content: str, public_key_hex: str
    ) -> bool:
        return signature.verify(
            self.curve, _id(user_id), public_key_hex, content.encode("utf-8"), sig
        )

    def get_sb(
        self,
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
        return keyswap.get_sb(self.curve, klen, pa, ra, pb, db, rb, rb_private, id_a, id_b)

    def get_sa(
        self,
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
        return keyswap.get_sa(
            self.curve, klen, pb, rb, pa, da, ra, ra_private, id_a, id_b, sb
        )

    def check_sa(
        self, v: Point, za: bytes, zb: bytes, ra: Point, rb: Point, sa: bytes
    ) -> bool:
        return keyswap.check_sa(self.curve, v, za, zb, ra, rb, sa)


def _id(user_id: str | None) -> bytes:
    return (user_id or DEFAULT_USER_ID).encode("utf-8")
