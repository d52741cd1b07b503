import logging

from smx.config import DEFAULT_KEY_LEN
from smx.crypto_utils import hex_to_bytes
from smx.ec.curve import Curve
from smx.exceptions import KeySwapError, SessionError
from smx.keyswap.messages import KeySwapConfirm, KeySwapInit, KeySwapInitResponse
from smx.keyswap.session import ConfirmedSession
from smx.sm2.keygen import decode_point, generate_key_pair
from smx.sm2.keyswap import get_sa
from smx.sm2.types import KeyPair, KeySwapFailure

logger = logging.getLogger(__name__)


class KeySwapInitiator:
    """Party A: starts the exchange, checks Sb and answers with Sa."""

    def __init__(self, curve: Curve, identity: str, key_pair: KeyPair | None = None) -> None:
        self.curve = curve
        self.identity = identity
        self.key_pair = key_pair if key_pair is not None else generate_key_pair(curve)
        self._ephemeral: KeyPair | None = None
        self._key_len = DEFAULT_KEY_LEN
        self.session: ConfirmedSession | None = None

    def start(self, key_len: int = DEFAULT_KEY_LEN) -> KeySwapInit:
        self._ephemeral = generate_key_pair(self.curve)
        self._key_len = key_len
        self.session = None
        return KeySwapInit(
            id_a=self.identity,
            public_key=self.key_pair.public_hex,
            ephemeral_key=self._ephemeral.public_hex,
            key_len=key_len,
        )

    def finish(self, msg: KeySwapInitResponse) -> KeySwapConfirm:
        if self._ephemeral is None:
            raise SessionError("Key exchange was not started")
        pb = decode_point(self.curve, msg.public_key)
        rb = decode_point(self.curve, msg.ephemeral_key)

        result = get_sa(
            self.curve,
            self._key_len,
            pb,
            rb,
            self.key_pair.public_key,
            self.key_pair.private_key,
            self._ephemeral.public_key,
            self._ephemeral.private_key,
            self.identity,
            msg.id_b,
            hex_to_bytes(msg.sb),
        )
        self._ephemeral = None
        if isinstance(result, KeySwapFailure):
            raise KeySwapError(result.message)

        self.session = ConfirmedSession(
            session_id=msg.session_id, id_a=self.identity, id_b=msg.id_b, key=result.ka
        )
        logger.debug("Session %s: Sb verified, sending Sa", msg.session_id)
        return KeySwapConfirm(session_id=msg.session_id, sa=result.sa_hex)

    def _ready(self) -> ConfirmedSession:
        if self.session is None:
            raise SessionError("No agreed session key")
        return self.session

    def encrypt(self, text: str) -> str:
        return self._ready().encrypt_message(text)

    def decrypt(self, cipher_hex: str) -> str:
        return self._ready().decrypt_message(cipher_hex)
