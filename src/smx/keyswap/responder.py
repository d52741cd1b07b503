import logging
import time
import uuid

from smx.config import SMXConfig
from smx.crypto_utils import hex_to_bytes
from smx.ec.curve import Curve
from smx.exceptions import DecryptionError, KeySwapError
from smx.keyswap.messages import (
    CryptoTestRequest,
    CryptoTestResponse,
    KeySwapConfirm,
    KeySwapConfirmResponse,
    KeySwapInit,
    KeySwapInitResponse,
)
from smx.keyswap.session import ConfirmedSession, PendingSession, SessionStore
from smx.sm2.keygen import decode_point, generate_key_pair
from smx.sm2.keyswap import check_sa, get_sb
from smx.sm2.types import KeyPair, KeySwapFailure

logger = logging.getLogger(__name__)


class KeySwapResponder:
    """
    Party B of the key exchange. Holds a long-term key pair, answers init
    requests with Sb and confirms sessions once A's Sa checks out.
    """

    def __init__(
        self,
        curve: Curve,
        config: SMXConfig | None = None,
        key_pair: KeyPair | None = None,
        store: SessionStore | None = None,
    ) -> None:
        self.curve = curve
        self.config = config if config is not None else SMXConfig()
        self.identity = self.config.responder_id
        self.key_pair = key_pair if key_pair is not None else generate_key_pair(curve)
        self.sessions = store if store is not None else SessionStore()
        logger.info("Responder %s public key: %s", self.identity, self.key_pair.public_hex)

    def init(self, msg: KeySwapInit) -> KeySwapInitResponse:
        logger.debug("KeySwap init from %s, key_len=%d", msg.id_a, msg.key_len)
        pa = decode_point(self.curve, msg.public_key)
        ra = decode_point(self.curve, msg.ephemeral_key)
        ephemeral = generate_key_pair(self.curve)

        result = get_sb(
            self.curve,
            msg.key_len,
            pa,
            ra,
            self.key_pair.public_key,
            self.key_pair.private_key,
            ephemeral.public_key,
            ephemeral.private_key,
            msg.id_a,
            self.identity,
        )
        if isinstance(result, KeySwapFailure):
            raise KeySwapError(f"getSb failed: {result.message}")

        session_id = str(uuid.uuid4())
        self.sessions.put(
            PendingSession(
                session_id=session_id,
                id_a=msg.id_a,
                id_b=self.identity,
                key=result.kb,
                v=result.v,
                za=result.za,
                zb=result.zb,
                ra=ra,
                rb=ephemeral.public_key,
            )
        )
        logger.info("Session %s opened for %s", session_id, msg.id_a)

        return KeySwapInitResponse(
            session_id=session_id,
            id_b=self.identity,
            public_key=self.key_pair.public_hex,
            ephemeral_key=ephemeral.public_hex,
            sb=result.sb_hex,
        )

    def confirm(self, msg: KeySwapConfirm) -> KeySwapConfirmResponse:
        session = self.sessions.get_typed(msg.session_id, PendingSession)
        valid = check_sa(
            self.curve,
            session.v,
            session.za,
            session.zb,
            session.ra,
            session.rb,
            hex_to_bytes(msg.sa),
        )
        if not valid:
            logger.warning("Session %s: Sa verification failed", msg.session_id)
            return KeySwapConfirmResponse(success=False, message="Sa verification failed")

        self.sessions.put(session.confirm())
        logger.info("Session %s confirmed", msg.session_id)
        return KeySwapConfirmResponse(success=True, message="Key exchange confirmed")

    def crypto_test(self, msg: CryptoTestRequest) -> CryptoTestResponse:
        """
        Decrypt the client's SM4 ciphertext, compare it with the plaintext the
        client claims, and answer with an encrypted server message.
        """
        session = self.sessions.get_typed(msg.session_id, ConfirmedSession)
        try:
            decrypted = session.decrypt_message(msg.ciphertext)
        except DecryptionError as e:
            logger.warning("Session %s: client ciphertext rejected: %s", msg.session_id, e)
            decrypted = ""
        matches = decrypted == msg.plaintext
        logger.debug("Session %s: client ciphertext matches=%s", msg.session_id, matches)

        reply = f"Response from Python Server: {int(time.time() * 1000)}"
        return CryptoTestResponse(
            decrypted=decrypted,
            matches=matches,
            server_plaintext=reply,
            server_ciphertext=session.encrypt_message(reply),
        )

    def close(self, session_id: str) -> None:
        self.sessions.remove(session_id)
        logger.info("Session %s closed", session_id)
