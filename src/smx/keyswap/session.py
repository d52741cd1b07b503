import threading
from typing import TypeVar

from pydantic import BaseModel, ConfigDict, Field

from smx.config import ZERO_IV_HEX
from smx.crypto_utils import SymmetricKey, hex_to_bytes
from smx.ec.point import Point
from smx.exceptions import SessionError
from smx.sm4.cipher import SM4

T = TypeVar("T", bound="Session")


class Session(BaseModel):  # type: ignore
    session_id: str
    id_a: str
    id_b: str
    key: SymmetricKey = Field(..., repr=False)

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    def cipher(self) -> SM4:
        return SM4(self.key, hex_to_bytes(ZERO_IV_HEX))


class PendingSession(Session):
    """Responder state after init: everything check_sa needs."""

    v: Point = Field(..., repr=False)
    za: bytes
    zb: bytes
    ra: Point
    rb: Point

    def confirm(self) -> "ConfirmedSession":
        return ConfirmedSession(
            session_id=self.session_id, id_a=self.id_a, id_b=self.id_b, key=self.key
        )


class ConfirmedSession(Session):
    def encrypt_message(self, text: str) -> str:
        return self.cipher().encrypt_text(text)

    def decrypt_message(self, cipher_hex: str) -> str:
        return self.cipher().decrypt_text(cipher_hex)


class SessionStore:
    """In-memory session table shared by request handlers."""

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()

    def put(self, session: Session) -> None:
        with self._lock:
            self._sessions[session.session_id] = session

    def get(self, session_id: str) -> Session:
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise SessionError("Session not found")
        return session

    def get_typed(self, session_id: str, session_type: type[T]) -> T:
        session = self.get(session_id)
        if not isinstance(session, session_type):
            raise SessionError(
                f"Session is in {type(session).__name__} state, not {session_type.__name__}"
            )
        return session

    def remove(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._sessions
