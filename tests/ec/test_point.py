import unittest

from parameterized import parameterized

from smx.ec.curve import Curve
from smx.ec.point import Point
from smx.exceptions import InvalidArgumentError, InvalidPointError
from smx.sm2.params import sm2_curve

# y^2 = x^3 + 2x + 3 over GF(97); (3, 6) generates a subgroup of order 5
SMALL = Curve(p=97, a=2, b=3, n=5, gx=3, gy=6, h=20, name="toy97")
SM2 = sm2_curve()


class TestPointArithmetic(unittest.TestCase):
    def test_generator_is_valid(self):
        self.assertTrue(SMALL.g.is_valid())
        self.assertTrue(SM2.g.is_valid())

    def test_infinity_is_identity(self):
        g = SMALL.g
        self.assertEqual(g.add(SMALL.infinity), g)
        self.assertEqual(SMALL.infinity.add(g), g)
        self.assertTrue(SMALL.infinity.is_valid())

    def test_twice(self):
        self.assertEqual(SMALL.g.twice(), SMALL.create_point(80, 10))

    def test_add_matches_twice(self):
        self.assertEqual(SMALL.g.add(SMALL.g), SMALL.g.twice())

    def test_add_negation_is_infinity(self):
        self.assertTrue(SMALL.g.add(SMALL.g.negate()).is_infinity)
        self.assertTrue((SM2.g - SM2.g).is_infinity)

    def test_small_subgroup_walk(self):
        expected = [(3, 6), (80, 10), (80, 87), (3, 91)]
        q = SMALL.infinity
        for x, y in expected:
            q = q + SMALL.g
            self.assertEqual(q, SMALL.create_point(x, y))
        self.assertTrue((q + SMALL.g).is_infinity)

    def test_twice_plus(self):
        g = SM2.g
        self.assertEqual(g.twice_plus(g), g.twice().add(g))

    def test_times_pow2(self):
        g = SM2.g
        self.assertEqual(g.times_pow2(3), g.twice().twice().twice())
        self.assertEqual(g.times_pow2(0), g)
        with self.assertRaises(ValueError):
            g.times_pow2(-1)

    def test_infinity_has_no_coordinates(self):
        with self.assertRaises(InvalidPointError):
            _ = SMALL.infinity.x
        with self.assertRaises(InvalidPointError):
            SMALL.infinity.encode()

    def test_points_from_different_curves_do_not_mix(self):
        with self.assertRaises(InvalidPointError):
            SMALL.g.add(SM2.g)

    def test_off_curve_point_is_invalid(self):
        point = Point(SMALL, SMALL.from_int(3), SMALL.from_int(7))
        self.assertFalse(point.is_valid())
        with self.assertRaises(InvalidPointError):
            SMALL.validate_point(3, 7)

    def test_half_infinity_rejected(self):
        with self.assertRaises(InvalidPointError):
            Point(SMALL, SMALL.from_int(3), None)


class TestPointEncoding(unittest.TestCase):
    def test_encode_decode(self):
        encoded = SM2.g.encode()
        self.assertEqual(len(encoded), 65)
        self.assertEqual(encoded[0], 0x04)
        self.assertEqual(SM2.decode_point(encoded), SM2.g)

    def test_encode_hex(self):
        self.assertEqual(
            SM2.g.encode_hex(),
            "04"
            "32c4ae2c1f1981195f9904466a39c9948fe30bbff2660be1715a4589334c74c7"
            "bc3736a2f4f6779c59bdcee36b692153d0a9877cc62a474002df32e52139f0a0",
        )

    @parameterized.expand([
        ("empty", b""),
        ("short", b"\x04" + b"\x01" * 63),
        ("long", b"\x04" + b"\x01" * 65),
    ])
    def test_decode_wrong_length(self, _name, encoded):
        with self.assertRaises(InvalidArgumentError):
            SM2.decode_point(encoded)

    def test_decode_compressed_tag_rejected(self):
        encoded = b"\x02" + SM2.g.encode()[1:]
        with self.assertRaises(InvalidArgumentError):
            SM2.decode_point(encoded)

    def test_decode_off_curve_rejected(self):
        encoded = bytearray(SM2.g.encode())
        encoded[-1] ^= 0x01
        with self.assertRaises(InvalidPointError):
            SM2.decode_point(bytes(encoded))

    def test_decode_coordinate_out_of_range(self):
        encoded = b"\x04" + b"\xff" * 64
        with self.assertRaises(InvalidPointError):
            SM2.decode_point(encoded)


class TestCurve(unittest.TestCase):
    def test_parameters(self):
        self.assertEqual(SM2.field_size, 256)
        self.assertEqual(SM2.field_bytes, 32)
        self.assertEqual(SM2.cofactor, 1)
        self.assertEqual(SM2.order, SM2.n)
        self.assertEqual(SM2.w, 127)

    def test_equality_by_parameters(self):
        self.assertEqual(sm2_curve(), SM2)
        self.assertNotEqual(SM2, SMALL)
        self.assertEqual(hash(sm2_curve()), hash(SM2))

    def test_bad_generator_rejected(self):
        with self.assertRaises(InvalidPointError):
            Curve(p=97, a=2, b=3, n=5, gx=3, gy=7)
