class SMXError(Exception):
    """Base class for every error raised by smx."""


class InvalidArgumentError(SMXError, ValueError):
    """Malformed input: wrong length, bad hex, empty data."""


class InvalidPointError(InvalidArgumentError):
    """Point is off the curve, at infinity, or belongs to another curve."""


class CurveInvariantError(SMXError, ArithmeticError):
    """Scalar multiplication produced a point that is not on the curve."""


class DecryptionError(SMXError, ValueError):
    """Ciphertext failed its integrity check."""


class KeySwapError(SMXError, ValueError):
    pass


class SessionError(SMXError, ValueError):
    pass
