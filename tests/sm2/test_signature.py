import unittest
from unittest.mock import patch

from parameterized import parameterized

from smx.exceptions import InvalidArgumentError
from smx.sm2 import signature
from smx.sm2.keygen import generate_key_pair
from smx.sm2.params import sm2_curve

CURVE = sm2_curve()
USER_ID = b"ALICE123@YAHOO.COM"


class TestSM2Signature(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.key_pair = generate_key_pair(CURVE)
        cls.signature = signature.sign(CURVE, USER_ID, cls.key_pair.private_hex, b"message digest")

    def test_format(self):
        sig = self.signature
        self.assertEqual(len(sig), 129)
        self.assertEqual(sig[64], "h")
        r, s = signature.parse_signature(sig)
        self.assertTrue(1 <= r < CURVE.n)
        self.assertTrue(1 <= s < CURVE.n)

    def test_verify(self):
        self.assertTrue(
            signature.verify(CURVE, USER_ID, self.key_pair.public_hex, b"message digest", self.signature)
        )

    def test_verify_with_point(self):
        self.assertTrue(
            signature.verify(CURVE, USER_ID, self.key_pair.public_key, b"message digest", self.signature)
        )

    def test_signatures_are_randomised(self):
        other = signature.sign(CURVE, USER_ID, self.key_pair.private_hex, b"message digest")
        self.assertNotEqual(other, self.signature)

    def test_wrong_message(self):
        self.assertFalse(
            signature.verify(CURVE, USER_ID, self.key_pair.public_hex, b"message digesT", self.signature)
        )

    def test_wrong_user_id(self):
        self.assertFalse(
            signature.verify(CURVE, b"BILL456@YAHOO.COM", self.key_pair.public_hex, b"message digest", self.signature)
        )

    def test_wrong_public_key(self):
        other = generate_key_pair(CURVE)
        self.assertFalse(
            signature.verify(CURVE, USER_ID, other.public_hex, b"message digest", self.signature)
        )

    def test_tampered_signature(self):
        r, s = signature.parse_signature(self.signature)
        forged = f"{r:064x}h{(s + 1) % CURVE.n:064x}"
        self.assertFalse(
            signature.verify(CURVE, USER_ID, self.key_pair.public_hex, b"message digest", forged)
        )

    @parameterized.expand([
        ("empty", ""),
        ("no_separator", "ab" * 64),
        ("not_hex", "zz" + "h" + "01"),
        ("too_many_parts", "01h02h03"),
        ("zero_r", "0" * 64 + "h" + "1" * 64),
        ("r_is_order", format(CURVE.n, "064x") + "h" + "1" * 64),
        ("hex_prefix", "0x" + "1" * 62 + "h" + "1" * 64),
        ("underscore", "1_1" + "h" + "1" * 64),
        ("plus_sign", "+1" + "h" + "1" * 64),
        ("whitespace", " 1" + "h" + "1" * 64 + "\n"),
        ("too_wide", "1" * 65 + "h" + "1" * 64),
    ])
    def test_malformed_signature_is_false(self, _name, sig):
        self.assertFalse(
            signature.verify(CURVE, USER_ID, self.key_pair.public_hex, b"message digest", sig)
        )

    def test_malformed_public_key_is_false(self):
        self.assertFalse(
            signature.verify(CURVE, USER_ID, "04" + "00" * 64, b"message digest", self.signature)
        )

    def test_parse_rejects_garbage(self):
        with self.assertRaises(InvalidArgumentError):
            signature.parse_signature("nothing")

    def test_last_private_key_rejected(self):
        with self.assertRaises(InvalidArgumentError):
            signature.sign(CURVE, USER_ID, CURVE.n - 1, b"message")

    def test_short_value_is_redrawn(self):
        with patch(
            "smx.sm2.signature.new_key_pair", wraps=signature.new_key_pair
        ) as mock_new_key_pair:
            with patch("smx.sm2.signature._full_width", side_effect=[False, True, True]):
                sig = signature.sign(CURVE, USER_ID, self.key_pair.private_hex, b"message digest")

        self.assertEqual(mock_new_key_pair.call_count, 2)
        self.assertTrue(
            signature.verify(CURVE, USER_ID, self.key_pair.public_hex, b"message digest", sig)
        )

    @parameterized.expand([
        ("prefix",),
        ("underscore",),
        ("plus",),
        ("spaces",),
    ])
    def test_decorated_valid_signature_rejected(self, kind):
        r, s = self.signature.split("h")
        decorated = {
            "prefix": f"0x{r}h{s}",
            "underscore": f"{r[:32]}_{r[32:]}h{s}",
            "plus": f"+{r}h{s}",
            "spaces": f" {r}h{s} ",
        }[kind]
        self.assertFalse(
            signature.verify(CURVE, USER_ID, self.key_pair.public_hex, b"message digest", decorated)
        )

    @parameterized.expand([(0,), (31,), (63,), (65,), (100,), (128,)])
    def test_flipped_hex_digit_rejected(self, position):
        chars = list(self.signature)
        chars[position] = format(int(chars[position], 16) ^ 0x1, "x")
        self.assertFalse(
            signature.verify(CURVE, USER_ID, self.key_pair.public_hex, b"message digest", "".join(chars))
        )
