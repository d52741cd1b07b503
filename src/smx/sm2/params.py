from smx.ec.curve import Curve
from smx.ec.multiplier import CombMultiplier

# sm2p256v1 recommended parameters (GB/T 32918.5)
SM2_P = 0xFFFFFFFEFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFF00000000FFFFFFFFFFFFFFFF
SM2_A = 0xFFFFFFFEFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFF00000000FFFFFFFFFFFFFFFC
SM2_B = 0x28E9FA9E9D9F5E344D5A9E4BCF6509A7F39789F515AB8F92DDBCBD414D940E93
SM2_N = 0xFFFFFFFEFFFFFFFFFFFFFFFFFFFFFFFF7203DF6B21C6052B53BBF40939D54123
SM2_GX = 0x32C4AE2C1F1981195F9904466A39C9948FE30BBFF2660BE1715A4589334C74C7
SM2_GY = 0xBC3736A2F4F6779C59BDCEE36B692153D0A9877CC62A474002DF32E52139F0A0
SM2_H = 1


def sm2_curve(multiplier: CombMultiplier | None = None) -> Curve:
    return Curve(
        p=SM2_P,
        a=SM2_A,
        b=SM2_B,
        n=SM2_N,
        gx=SM2_GX,
        gy=SM2_GY,
        h=SM2_H,
        multiplier=multiplier,
        name="sm2p256v1",
    )
