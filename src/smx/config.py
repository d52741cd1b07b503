import os
from typing import Literal

from pydantic import BaseModel, Field

# Default user identity from GB/T 32918 when the caller supplies none
DEFAULT_USER_ID = "1234567812345678"

# Bytes of key material agreed by a key exchange (one SM4 key)
DEFAULT_KEY_LEN = 16
MAX_KEY_LEN = 1024

RESPONDER_ID = "server@demo.aicc"

SIGNATURE_SEPARATOR = "h"

# SM4 session traffic uses an all-zero IV; the key is fresh per session
ZERO_IV_HEX = "00" * 16

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class SMXConfig(BaseModel):  # type: ignore
    responder_id: str = Field(default=RESPONDER_ID, min_length=1)
    key_len: int = Field(default=DEFAULT_KEY_LEN, ge=1, le=MAX_KEY_LEN)
    log_level: LogLevel = "INFO"

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "SMXConfig":
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}
        if "SMX_RESPONDER_ID" in env:
            values["responder_id"] = env["SMX_RESPONDER_ID"]
        if "SMX_KEY_LEN" in env:
            values["key_len"] = env["SMX_KEY_LEN"]
        if "SMX_LOG_LEVEL" in env:
            values["log_level"] = env["SMX_LOG_LEVEL"].upper()
        return cls(**values)
