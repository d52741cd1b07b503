import unittest
from unittest.mock import patch

from smx.sm2 import cipher, signature
from smx.sm2.kdf import user_z
from smx.sm2.keygen import key_pair_from_private
from smx.sm2.params import sm2_curve

CURVE = sm2_curve()

# GM/T 0003.5 example on sm2p256v1
D = 0x3945208F7B2144B13F36E38AC6D39F95889393692860B51A42FB81EF4DF7C5B8
K = 0x59276E27D506861A16680F3AD9C02DCCEF3CC1FA3CDBE4CE6D54B80DEAC1BC21
PX = 0x09F9DF311E5421A150DD7D161E4BC5C672179FAD1833FC076BB08FF356F35020
PY = 0xCCEA490CE26775A52DC6EA718CC1AA600AED05FBF35E084A6632F6072DA9AD13
USER_ID = b"1234567812345678"

Z = "b2e14c5c79c6df5b85f4fe7ed8db7a262b9da7e07ccb0ea9f4747b8ccda8a4f3"
E = 0xF0B43E94BA45ACCAACE692ED534382EB17E6AB5A19CE7B31F4486FDFC0D28640
R = "f5a03b0648d2c4630eeac513e1bb81a15944da3827d5b74143ac7eaceee720b3"
S = "b1b6aa29df212fd8763182bc0d421ca1bb9038fd1f7f42d4840b69c485bbc1aa"

CIPHERTEXT = (
    "04"
    "04ebfc718e8d1798620432268e77feb6415e2ede0e073c0f4f640ecd2e149a73"
    "e858f9d81e5430a57b36daab8f950a3c64e6ee6a63094d99283aff767e124df0"
    "59983c18f809e262923c53aec295d30383b54e39d609d160afcb1908d0bd8766"
    "21886ca989ca9c7d58087307ca93092d651efa"
)


class TestStandardVectors(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.key_pair = key_pair_from_private(CURVE, D)
        cls.ephemeral = key_pair_from_private(CURVE, K)

    def test_public_key(self):
        self.assertEqual(self.key_pair.public_key, CURVE.create_point(PX, PY))

    def test_identity_digest(self):
        self.assertEqual(user_z(CURVE, USER_ID, self.key_pair.public_key).hex(), Z)

    def test_message_digest(self):
        self.assertEqual(
            signature.message_digest(CURVE, USER_ID, self.key_pair.public_key, b"message digest"),
            E,
        )

    def test_signature_with_fixed_ephemeral_key(self):
        with patch("smx.sm2.signature.new_key_pair", return_value=self.ephemeral):
            sig = signature.sign(CURVE, USER_ID, D, b"message digest")
        self.assertEqual(sig, f"{R}h{S}")
        self.assertTrue(
            signature.verify(CURVE, USER_ID, self.key_pair.public_hex, b"message digest", sig)
        )

    def test_ciphertext_with_fixed_ephemeral_key(self):
        with patch("smx.sm2.cipher.new_key_pair", return_value=self.ephemeral):
            ciphertext = cipher.encrypt(CURVE, self.key_pair.public_key, b"encryption standard")
        self.assertEqual(ciphertext, CIPHERTEXT)

    def test_decrypt_known_ciphertext(self):
        self.assertEqual(cipher.decrypt(CURVE, D, CIPHERTEXT), b"encryption standard")
