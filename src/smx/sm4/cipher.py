"""
SM4 block cipher (GB/T 32907-2016) in CBC mode with PKCS#7 padding.
"""

import logging
from typing import Self

from smx.crypto_utils import bytes_to_hex, hex_to_bytes, xor_bytes
from smx.exceptions import DecryptionError, InvalidArgumentError
from smx.sm3.hashing import sm3_hex
from smx.util import rotl32, words_from_bytes, words_to_bytes

logger = logging.getLogger(__name__)

BLOCK_SIZE = 16
KEY_SIZE = 16
ROUNDS = 32

SBOX = (
    0xD6, 0x90, 0xE9, 0xFE, 0xCC, 0xE1, 0x3D, 0xB7, 0x16, 0xB6, 0x14, 0xC2, 0x28, 0xFB, 0x2C, 0x05,
    0x2B, 0x67, 0x9A, 0x76, 0x2A, 0xBE, 0x04, 0xC3, 0xAA, 0x44, 0x13, 0x26, 0x49, 0x86, 0x06, 0x99,
    0x9C, 0x42, 0x50, 0xF4, 0x91, 0xEF, 0x98, 0x7A, 0x33, 0x54, 0x0B, 0x43, 0xED, 0xCF, 0xAC, 0x62,
    0xE4, 0xB3, 0x1C, 0xA9, 0xC9, 0x08, 0xE8, 0x95, 0x80, 0xDF, 0x94, 0xFA, 0x75, 0x8F, 0x3F, 0xA6,
    0x47, 0x07, 0xA7, 0xFC, 0xF3, 0x73, 0x17, 0xBA, 0x83, 0x59, 0x3C, 0x19, 0xE6, 0x85, 0x4F, 0xA8,
    0x68, 0x6B, 0x81, 0xB2, 0x71, 0x64, 0xDA, 0x8B, 0xF8, 0xEB, 0x0F, 0x4B, 0x70, 0x56, 0x9D, 0x35,
    0x1E, 0x24, 0x0E, 0x5E, 0x63, 0x58, 0xD1, 0xA2, 0x25, 0x22, 0x7C, 0x3B, 0x01, 0x21, 0x78, 0x87,
    0xD4, 0x00, 0x46, 0x57, 0x9F, 0xD3, 0x27, 0x52, 0x4C, 0x36, 0x02, 0xE7, 0xA0, 0xC4, 0xC8, 0x9E,
    0xEA, 0xBF, 0x8A, 0xD2, 0x40, 0xC7, 0x38, 0xB5, 0xA3, 0xF7, 0xF2, 0xCE, 0xF9, 0x61, 0x15, 0xA1,
    0xE0, 0xAE, 0x5D, 0xA4, 0x9B, 0x34, 0x1A, 0x55, 0xAD, 0x93, 0x32, 0x30, 0xF5, 0x8C, 0xB1, 0xE3,
    0x1D, 0xF6, 0xE2, 0x2E, 0x82, 0x66, 0xCA, 0x60, 0xC0, 0x29, 0x23, 0xAB, 0x0D, 0x53, 0x4E, 0x6F,
    0xD5, 0xDB, 0x37, 0x45, 0xDE, 0xFD, 0x8E, 0x2F, 0x03, 0xFF, 0x6A, 0x72, 0x6D, 0x6C, 0x5B, 0x51,
    0x8D, 0x1B, 0xAF, 0x92, 0xBB, 0xDD, 0xBC, 0x7F, 0x11, 0xD9, 0x5C, 0x41, 0x1F, 0x10, 0x5A, 0xD8,
    0x0A, 0xC1, 0x31, 0x88, 0xA5, 0xCD, 0x7B, 0xBD, 0x2D, 0x74, 0xD0, 0x12, 0xB8, 0xE5, 0xB4, 0xB0,
    0x89, 0x69, 0x97, 0x4A, 0x0C, 0x96, 0x77, 0x7E, 0x65, 0xB9, 0xF1, 0x09, 0xC5, 0x6E, 0xC6, 0x84,
    0x18, 0xF0, 0x7D, 0xEC, 0x3A, 0xDC, 0x4D, 0x20, 0x79, 0xEE, 0x5F, 0x3E, 0xD7, 0xCB, 0x39, 0x48,
)

FK = (0xA3B1BAC6, 0x56AA3350, 0x677D9197, 0xB27022DC)

CK = (
    0x00070E15, 0x1C232A31, 0x383F464D, 0x545B6269,
    0x70777E85, 0x8C939AA1, 0xA8AFB6BD, 0xC4CBD2D9,
    0xE0E7EEF5, 0xFC030A11, 0x181F262D, 0x343B4249,
    0x50575E65, 0x6C737A81, 0x888F969D, 0xA4ABB2B9,
    0xC0C7CED5, 0xDCE3EAF1, 0xF8FF060D, 0x141B2229,
    0x30373E45, 0x4C535A61, 0x686F767D, 0x848B9299,
    0xA0A7AEB5, 0xBCC3CAD1, 0xD8DFE6ED, 0xF4FB0209,
    0x10171E25, 0x2C333A41, 0x484F565D, 0x646B7279,
)


def tau(a: int) -> int:
    """Byte-wise S-box substitution of a 32-bit word."""
    return (
        SBOX[(a >> 24) & 0xFF] << 24
        | SBOX[(a >> 16) & 0xFF] << 16
        | SBOX[(a >> 8) & 0xFF] << 8
        | SBOX[a & 0xFF]
    )


def transform_t(a: int) -> int:
    b = tau(a)
    return b ^ rotl32(b, 2) ^ rotl32(b, 10) ^ rotl32(b, 18) ^ rotl32(b, 24)


def transform_t_prime(a: int) -> int:
    b = tau(a)
    return b ^ rotl32(b, 13) ^ rotl32(b, 23)


def expand_key(key: bytes) -> list[int]:
    if len(key) != KEY_SIZE:
        raise InvalidArgumentError(f"SM4 key must be exactly {KEY_SIZE} bytes")
    k = [mk ^ fk for mk, fk in zip(words_from_bytes(key), FK)]
    for i in range(ROUNDS):
        k.append(k[i] ^ transform_t_prime(k[i + 1] ^ k[i + 2] ^ k[i + 3] ^ CK[i]))
    return k[4:]


def crypt_block(block: bytes, round_keys: list[int] | tuple[int, ...]) -> bytes:
    x = words_from_bytes(block)
    for i in range(ROUNDS):
        x.append(x[i] ^ transform_t(x[i + 1] ^ x[i + 2] ^ x[i + 3] ^ round_keys[i]))
    return words_to_bytes(x[:-5:-1])


def pad(data: bytes) -> bytes:
    n = BLOCK_SIZE - len(data) % BLOCK_SIZE
    return data + bytes([n]) * n


def unpad(data: bytes) -> bytes:
    if not data:
        raise DecryptionError("Nothing to unpad")
    n = data[-1]
    if n < 1 or n > BLOCK_SIZE or data[-n:] != bytes([n]) * n:
        raise DecryptionError("Invalid padding")
    return data[:-n]


def derive_text_key(text: str) -> bytes:
    """
    16-byte key material from arbitrary text.

    Text that is already 16 bytes of UTF-8 is used as is; anything else is
    replaced by the first 16 characters of its upper-case SM3 hex digest.
    """
    raw = text.encode("utf-8")
    if len(raw) == KEY_SIZE:
        return raw
    return sm3_hex(raw, upper=True)[:KEY_SIZE].encode("ascii")


class SM4:
    """
    SM4-CBC cipher bound to one key and IV.

    Each encrypt/decrypt call chains from a fresh copy of the IV, so a single
    instance can be reused for many messages. Not safe to share between
    threads.
    """

    def __init__(self, key: bytes, iv: bytes) -> None:
        if len(iv) != BLOCK_SIZE:
            raise InvalidArgumentError(f"SM4 IV must be exactly {BLOCK_SIZE} bytes")
        self._round_keys = expand_key(bytes(key))
        self._iv = bytes(iv)

    @classmethod
    def from_text(cls, key: str, iv: str) -> Self:
        return cls(derive_text_key(key), derive_text_key(iv))

    @classmethod
    def from_hex(cls, key_hex: str, iv_hex: str) -> Self:
        return cls(hex_to_bytes(key_hex), hex_to_bytes(iv_hex))

    def encrypt_block(self, block: bytes) -> bytes:
        if len(block) != BLOCK_SIZE:
            raise InvalidArgumentError(f"Block must be exactly {BLOCK_SIZE} bytes")
        return crypt_block(block, self._round_keys)

    def decrypt_block(self, block: bytes) -> bytes:
        if len(block) != BLOCK_SIZE:
            raise InvalidArgumentError(f"Block must be exactly {BLOCK_SIZE} bytes")
        return crypt_block(block, self._round_keys[::-1])

    def encrypt(self, data: bytes) -> bytes:
        padded = pad(bytes(data))
        chain = self._iv
        out = bytearray()
        for i in range(0, len(padded), BLOCK_SIZE):
            chain = crypt_block(xor_bytes(padded[i : i + BLOCK_SIZE], chain), self._round_keys)
            out += chain
        return bytes(out)

    def decrypt(self, data: bytes) -> bytes:
        if not data or len(data) % BLOCK_SIZE:
            raise InvalidArgumentError("Ciphertext length must be a positive multiple of 16")
        reversed_keys = self._round_keys[::-1]
        chain = self._iv
        out = bytearray()
        for i in range(0, len(data), BLOCK_SIZE):
            block = data[i : i + BLOCK_SIZE]
            out += xor_bytes(crypt_block(block, reversed_keys), chain)
            chain = block
        try:
            return unpad(bytes(out))
        except DecryptionError:
            logger.warning("SM4 decryption produced invalid padding")
            raise

    def encrypt_text(self, text: str) -> str:
        return bytes_to_hex(self.encrypt(text.encode("utf-8")))

    def decrypt_text(self, cipher_hex: str) -> str:
        plaintext = self.decrypt(hex_to_bytes(cipher_hex))
        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecryptionError("Decrypted data is not valid UTF-8") from e
