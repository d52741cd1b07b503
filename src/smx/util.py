MASK32 = 0xFFFFFFFF


def modinv(x: int, p: int) -> int:
    """Modular inverse modulo p (p is prime)."""
    if x % p == 0:
        raise ZeroDivisionError("0 has no inverse modulo p")
    return pow(x, -1, p)


def rotl32(x: int, n: int) -> int:
    n %= 32
    return ((x << n) | (x >> (32 - n))) & MASK32


def naf_weight(k: int) -> int:
    """
    Number of non-zero digits in the non-adjacent form of k.

    (3k XOR k) >> 1 has a set bit exactly where the NAF of k has a non-zero
    digit, so the weight is its population count.
    """
    if k == 0:
        return 0
    return (((k << 1) + k) ^ k).bit_count()


def words_from_bytes(data: bytes) -> list[int]:
    """Split data into big-endian 32-bit words."""
    return [int.from_bytes(data[i : i + 4], "big") for i in range(0, len(data), 4)]


def words_to_bytes(words: list[int]) -> bytes:
    return b"".join((w & MASK32).to_bytes(4, "big") for w in words)
