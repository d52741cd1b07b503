from typing import Literal, Self, TypeAlias

from pydantic import BaseModel, ConfigDict, Field, model_validator

from smx.crypto_utils import int_to_bytes
from smx.ec.point import Point

KEY_SIZE = 32
POINT_SIZE = 2 * KEY_SIZE + 1
DIGEST_SIZE = 32

C1_HEX_LENGTH = 2 * POINT_SIZE
C3_HEX_LENGTH = 2 * DIGEST_SIZE

# Confirmation tag prefixes: responder (B) and initiator (A)
TAG_RESPONDER = 0x02
TAG_INITIATOR = 0x03


class KeyPair(BaseModel):  # type: ignore
    public_key: Point
    private_key: int = Field(..., repr=False)

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    @model_validator(mode="after")
    def _check_key_material(self) -> Self:
        q = self.public_key
        if q.is_infinity:
            raise ValueError("Public key is at infinity")
        if not q.is_valid():
            raise ValueError("Public key is not on the curve")
        if not 2 <= self.private_key < q.curve.n:
            raise ValueError("Private key is out of range")
        return self

    @property
    def public_hex(self) -> str:
        return self.public_key.encode_hex()

    @property
    def private_hex(self) -> str:
        return int_to_bytes(self.private_key, KEY_SIZE).hex()


class ExchangeResult(BaseModel):  # type: ignore
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)


class ResponderExchange(ExchangeResult):
    """Responder (B) side: shared point V, identity digests, Kb and tag Sb."""

    success: Literal[True] = True
    v: Point = Field(..., repr=False)
    za: bytes = Field(..., min_length=DIGEST_SIZE, max_length=DIGEST_SIZE)
    zb: bytes = Field(..., min_length=DIGEST_SIZE, max_length=DIGEST_SIZE)
    kb: bytes = Field(..., min_length=1, repr=False)
    sb: bytes = Field(..., min_length=DIGEST_SIZE, max_length=DIGEST_SIZE)

    @property
    def kb_hex(self) -> str:
        return self.kb.hex()

    @property
    def sb_hex(self) -> str:
        return self.sb.hex()


class InitiatorExchange(ExchangeResult):
    """Initiator (A) side: Ka and tag Sa, produced after Sb was verified."""

    success: Literal[True] = True
    u: Point = Field(..., repr=False)
    za: bytes = Field(..., min_length=DIGEST_SIZE, max_length=DIGEST_SIZE)
    zb: bytes = Field(..., min_length=DIGEST_SIZE, max_length=DIGEST_SIZE)
    ka: bytes = Field(..., min_length=1, repr=False)
    sa: bytes = Field(..., min_length=DIGEST_SIZE, max_length=DIGEST_SIZE)

    @property
    def ka_hex(self) -> str:
        return self.ka.hex()

    @property
    def sa_hex(self) -> str:
        return self.sa.hex()


class KeySwapFailure(ExchangeResult):
    success: Literal[False] = False
    message: str


KeySwapResult: TypeAlias = ResponderExchange | InitiatorExchange | KeySwapFailure
