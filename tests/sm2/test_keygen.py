import unittest
from unittest.mock import patch

from parameterized import parameterized
from pydantic import ValidationError

from smx.exceptions import InvalidArgumentError, InvalidPointError
from smx.sm2.keygen import (
    decode_point,
    decode_private_key,
    decode_public_key,
    generate_key_pair,
    has_full_width,
    key_pair_from_private,
    public_key_from_private,
    random_scalar,
)
from smx.sm2.params import sm2_curve
from smx.sm2.types import KeyPair
from smx.util import naf_weight

CURVE = sm2_curve()
D_A = 0x6FCBA2EF9AE0AB902BC3BDE3FF915D44BA4CC78F88E2F8E7F8996D3B8CCEEDEE


class TestKeyGeneration(unittest.TestCase):
    def test_generated_pair_is_full_width(self):
        key_pair = generate_key_pair(CURVE)
        self.assertTrue(has_full_width(key_pair))
        self.assertEqual(len(key_pair.private_hex), 64)
        self.assertEqual(len(key_pair.public_hex), 130)
        self.assertTrue(key_pair.public_hex.startswith("04"))
        self.assertEqual(key_pair.public_key, CURVE.g.multiply(key_pair.private_key))

    def test_pairs_differ(self):
        self.assertNotEqual(
            generate_key_pair(CURVE).private_key, generate_key_pair(CURVE).private_key
        )

    def test_random_scalar_bounds_and_weight(self):
        for _ in range(5):
            d = random_scalar(CURVE)
            self.assertTrue(2 <= d < CURVE.n)
            self.assertGreaterEqual(naf_weight(d), CURVE.n.bit_length() >> 2)

    def test_random_scalar_redraws(self):
        draws = [0, 1, CURVE.n, 1 << 255, D_A]
        with patch("smx.sm2.keygen.random_bits", side_effect=draws) as mock_bits:
            self.assertEqual(random_scalar(CURVE), D_A)
        self.assertEqual(mock_bits.call_count, len(draws))

    def test_private_key_not_in_repr(self):
        key_pair = key_pair_from_private(CURVE, D_A)
        self.assertNotIn(format(D_A, "x"), repr(key_pair).lower())

    @parameterized.expand([("zero", 0), ("one", 1)])
    def test_key_pair_rejects_small_private_key(self, _name, d):
        with self.assertRaises(ValidationError):
            KeyPair(public_key=CURVE.g, private_key=d)

    def test_key_pair_rejects_infinity(self):
        with self.assertRaises(ValidationError):
            KeyPair(public_key=CURVE.infinity, private_key=D_A)

    def test_public_key_from_private(self):
        self.assertEqual(public_key_from_private(CURVE, 1), CURVE.g)


class TestKeyDecoding(unittest.TestCase):
    def setUp(self) -> None:
        self.key_pair = key_pair_from_private(CURVE, D_A)

    def test_decode_public_hex(self):
        self.assertEqual(
            decode_public_key(CURVE, self.key_pair.public_hex), self.key_pair.public_key
        )

    def test_decode_public_without_tag(self):
        bare = self.key_pair.public_key.encode()[1:]
        self.assertEqual(decode_public_key(CURVE, bare), self.key_pair.public_key)

    def test_strict_decode_requires_tag(self):
        self.assertEqual(decode_point(CURVE, self.key_pair.public_hex), self.key_pair.public_key)
        with self.assertRaises(InvalidArgumentError):
            decode_point(CURVE, self.key_pair.public_hex[2:])

    def test_decode_public_rejects_garbage(self):
        with self.assertRaises(InvalidArgumentError):
            decode_public_key(CURVE, "zz")
        with self.assertRaises(InvalidPointError):
            decode_public_key(CURVE, "04" + "00" * 64)

    @parameterized.expand([
        ("int", D_A),
        ("hex", format(D_A, "064x")),
        ("bytes", D_A.to_bytes(32, "big")),
    ])
    def test_decode_private(self, _name, value):
        self.assertEqual(decode_private_key(CURVE, value), D_A)

    @parameterized.expand([
        ("zero", 0),
        ("one", 1),
        ("order", CURVE.n),
        ("empty", b""),
        ("empty_hex", ""),
    ])
    def test_decode_private_out_of_range(self, _name, value):
        with self.assertRaises(InvalidArgumentError):
            decode_private_key(CURVE, value)
