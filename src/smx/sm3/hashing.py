"""
SM3 cryptographic hash (GB/T 32905-2016).

Streaming usage:

    h = SM3()
    h.update(b"part one").update("part two")
    digest = h.finish()  # 32 bytes, h is reset and reusable
"""

from typing import Self

from smx.util import MASK32, rotl32, words_from_bytes, words_to_bytes

IV = (
    0x7380166F,
    0x4914B2B9,
    0x172442D7,
    0xDA8A0600,
    0xA96F30BC,
    0x163138AA,
    0xE38DEE4D,
    0xB0FB0E4E,
)

BLOCK_SIZE = 64
DIGEST_SIZE = 32

T_LOW = 0x79CC4519
T_HIGH = 0x7A879D8A

# Round constants T_j <<< (j mod 32)
ROUND_CONSTANTS = tuple(rotl32(T_LOW if j < 16 else T_HIGH, j % 32) for j in range(64))

MASK64 = 0xFFFFFFFFFFFFFFFF


def p0(x: int) -> int:
    return x ^ rotl32(x, 9) ^ rotl32(x, 17)


def p1(x: int) -> int:
    return x ^ rotl32(x, 15) ^ rotl32(x, 23)


def ff(j: int, x: int, y: int, z: int) -> int:
    if j < 16:
        return x ^ y ^ z
    return (x & y) | (x & z) | (y & z)


def gg(j: int, x: int, y: int, z: int) -> int:
    if j < 16:
        return x ^ y ^ z
    return (x & y) | (~x & z)


def expand(block: bytes) -> tuple[list[int], list[int]]:
    """Message expansion of one 64-byte block into W[0..67] and W'[0..63]."""
    w = words_from_bytes(block)
    for j in range(16, 68):
        w.append(p1(w[j - 16] ^ w[j - 9] ^ rotl32(w[j - 3], 15)) ^ rotl32(w[j - 13], 7) ^ w[j - 6])
    w_prime = [w[j] ^ w[j + 4] for j in range(64)]
    return w, w_prime


def compress(v: list[int], block: bytes) -> list[int]:
    w, w_prime = expand(block)
    a, b, c, d, e, f, g, h = v
    for j in range(64):
        a12 = rotl32(a, 12)
        ss1 = rotl32((a12 + e + ROUND_CONSTANTS[j]) & MASK32, 7)
        ss2 = ss1 ^ a12
        tt1 = (ff(j, a, b, c) + d + ss2 + w_prime[j]) & MASK32
        tt2 = (gg(j, e, f, g) + h + ss1 + w[j]) & MASK32
        d = c
        c = rotl32(b, 9)
        b = a
        a = tt1
        h = g
        g = rotl32(f, 19)
        f = e
        e = p0(tt2)
    return [x ^ y for x, y in zip(v, (a, b, c, d, e, f, g, h))]


class SM3:
    """Stateful SM3 engine. Not safe to share between threads."""

    def __init__(self) -> None:
        self._v = list(IV)
        self._buffer = bytearray()
        self._length = 0

    def reset(self) -> None:
        self._v = list(IV)
        self._buffer = bytearray()
        self._length = 0

    def update(self, data: bytes | bytearray | str) -> Self:
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._length += len(data)
        buf = self._buffer
        buf.extend(data)
        offset = 0
        while len(buf) - offset >= BLOCK_SIZE:
            self._v = compress(self._v, bytes(buf[offset : offset + BLOCK_SIZE]))
            offset += BLOCK_SIZE
        if offset:
            del buf[:offset]
        return self

    def finish(self) -> bytes:
        """Pad, compress the tail, return the digest and reset the engine."""
        bit_length = (self._length * 8) & MASK64
        tail = bytes(self._buffer) + b"\x80"
        tail += b"\x00" * ((56 - len(tail)) % BLOCK_SIZE)
        tail += bit_length.to_bytes(8, "big")

        v = self._v
        for i in range(0, len(tail), BLOCK_SIZE):
            v = compress(v, tail[i : i + BLOCK_SIZE])

        digest = words_to_bytes(v)
        self.reset()
        return digest


def sm3(data: bytes | str) -> bytes:
    return SM3().update(data).finish()


def sm3_hex(data: bytes | str, upper: bool = True) -> str:
    digest = sm3(data).hex()
    return digest.upper() if upper else digest
