import logging

from smx.config import SMXConfig
from smx.keyswap.initiator import KeySwapInitiator
from smx.keyswap.messages import CryptoTestRequest
from smx.keyswap.responder import KeySwapResponder
from smx.sm2.api import SM2
from smx.sm2.params import sm2_curve
from smx.sm4.cipher import SM4


def main() -> None:
    """Walk through SM2, SM3, SM4 and the SM2 key exchange."""
    config = SMXConfig.from_env()
    logging.basicConfig(
        level=config.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    curve = sm2_curve()
    sm2 = SM2(curve)

    print("=== SM2 Demo ===")
    key_pair = sm2.gen_key_pair()
    print(f"Public key: {key_pair.public_hex}")

    ciphertext = sm2.encrypt("国密SM2非对称加密算法", key_pair.public_hex)
    print(f"Ciphertext: {ciphertext}")
    print(f"Decrypted: {sm2.decrypt(ciphertext, key_pair.private_hex)}")

    signature = sm2.sign(None, "message to sign", key_pair.private_hex)
    print(f"Signature: {signature}")
    print(f"Verified: {sm2.verify(None, signature, 'message to sign', key_pair.public_hex)}")

    print("\n=== SM4 Demo ===")
    sm4 = SM4.from_text("this is the key", "this is the iv")
    encrypted = sm4.encrypt_text("国密SM4对称加密算法")
    print(f"Ciphertext: {encrypted}")
    print(f"Decrypted: {sm4.decrypt_text(encrypted)}")

    print("\n=== Key Exchange Demo ===")
    responder = KeySwapResponder(curve, config)
    alice = KeySwapInitiator(curve, "ALICE123@YAHOO.COM")

    init_response = responder.init(alice.start(config.key_len))
    print(f"Session: {init_response.session_id}")
    confirm_response = responder.confirm(alice.finish(init_response))
    print(f"Confirmed: {confirm_response.success}")

    plaintext = "Hello from the initiator"
    result = responder.crypto_test(
        CryptoTestRequest(
            session_id=init_response.session_id,
            plaintext=plaintext,
            ciphertext=alice.encrypt(plaintext),
        )
    )
    print(f"Server decrypted: {result.decrypted} (match: {result.matches})")
    print(f"Server said: {alice.decrypt(result.server_ciphertext)}")


if __name__ == "__main__":
    main()
