from pydantic import BaseModel, ConfigDict, Field

from smx.config import DEFAULT_KEY_LEN, MAX_KEY_LEN

# Uncompressed point 04 || X || Y, and a 32-byte confirmation tag
POINT_HEX = r"^04[0-9a-fA-F]{128}$"
TAG_HEX = r"^[0-9a-fA-F]{64}$"


class KeySwapMessage(BaseModel):  # type: ignore
    model_config = ConfigDict(frozen=True)


class KeySwapInit(KeySwapMessage):
    id_a: str = Field(..., min_length=1)
    public_key: str = Field(..., pattern=POINT_HEX)
    ephemeral_key: str = Field(..., pattern=POINT_HEX)
    key_len: int = Field(default=DEFAULT_KEY_LEN, ge=1, le=MAX_KEY_LEN)


class KeySwapInitResponse(KeySwapMessage):
    session_id: str
    id_b: str
    public_key: str = Field(..., pattern=POINT_HEX)
    ephemeral_key: str = Field(..., pattern=POINT_HEX)
    sb: str = Field(..., pattern=TAG_HEX)


class KeySwapConfirm(KeySwapMessage):
    session_id: str
    sa: str = Field(..., pattern=TAG_HEX)


class KeySwapConfirmResponse(KeySwapMessage):
    success: bool
    message: str


class CryptoTestRequest(KeySwapMessage):
    session_id: str
    plaintext: str
    ciphertext: str


class CryptoTestResponse(KeySwapMessage):
    decrypted: str
    matches: bool
    server_plaintext: str
    server_ciphertext: str
