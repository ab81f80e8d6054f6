"""Fixed-width modular arithmetic used by the key generator and the cipher.

Python integers never overflow, so the widths the cryptosystem is defined over (u32 messages, u64 moduli and
ciphertexts, a u128 accumulator for products) are enforced explicitly. Leaving a width is a contract violation and
raises `OverflowError` instead of wrapping around.

Typical usage example:

    modexp(450, 768, 517)
    mod_inverse(65537, totient)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import math

U32_MAX: int = 2**32 - 1
U64_MAX: int = 2**64 - 1
U128_MAX: int = 2**128 - 1
I128_MIN: int = -(2**127)
I128_MAX: int = 2**127 - 1


def check_width(value: int, bits: int, name: str = "value") -> int:
    """Ensure `value` is representable as an unsigned integer of `bits` width.

    Args:
        value: The integer to check.
        bits: The unsigned width in bits.
        name: Name used in the error message.

    Returns:
        `value`, unchanged.

    Raises:
        OverflowError: If `value` is negative or does not fit in `bits` bits.
    """
    if not 0 <= value < (1 << bits):
        raise OverflowError(f"{name} does not fit in u{bits}: {value}")
    return value


def _checked_mul(a: int, b: int) -> int:
    """Multiply two accumulator values, refusing to leave the u128 range."""
    product = a * b
    if product > U128_MAX:
        raise OverflowError("u128 accumulator overflow during modular multiplication.")
    return product


def modexp(base: int, exponent: int, modulus: int) -> int:
    """Computes `(base ** exponent) % modulus` by binary square-and-multiply.

    All inputs are u64. Products are formed in a u128 accumulator, which holds `(modulus - 1) ** 2` for any u64
    modulus, so the checks below only fire if the width contract is broken.

    Args:
        base: The base, need not be reduced.
        exponent: The exponent.
        modulus: The modulus. Must be non-zero.

    Returns:
        The result, in `[0, modulus)`.

    Raises:
        ValueError: If `modulus` is zero.
        OverflowError: If an input is outside u64 or an intermediate product leaves u128.
    """
    check_width(base, 64, "base")
    check_width(exponent, 64, "exponent")
    check_width(modulus, 64, "modulus")
    if modulus == 0:
        raise ValueError("Modulus can't be zero.")
    _checked_mul(modulus - 1, modulus - 1)
    z, x, y = 1, base, exponent
    while y > 0:
        if y & 1:
            z = _checked_mul(z, x) % modulus
        y >>= 1
        x = _checked_mul(x, x) % modulus
    # z is still 1 when exponent is 0, which is only in range for modulus > 1.
    z %= modulus
    return check_width(z, 64, "result")


def mod_inverse(a: int, m: int) -> int | None:
    """Calculate the modular multiplicative inverse of `a` modulo `m`.

    Extended Euclidean algorithm keeping only the Bezout coefficient of `a`. Both arguments are taken as signed
    128-bit values, wide enough for any u64 totient while the coefficient goes negative during iteration.

    Args:
        a: The number to invert.
        m: The modulus.

    Returns:
        `x` in `[0, m)` with `(a * x) % m == 1`, or None if `m <= 0` or `a` and `m` are not coprime.

    Raises:
        OverflowError: If `a` or `m` does not fit in i128.
    """
    for value, name in ((a, "a"), (m, "m")):
        if not I128_MIN <= value <= I128_MAX:
            raise OverflowError(f"{name} does not fit in i128: {value}")
    if m <= 0:
        return None
    # Remainders stay non-negative from here on, so floor division is the Euclidean quotient.
    a %= m
    t, newt = 0, 1
    r, newr = m, a
    while newr != 0:
        quotient = r // newr
        t, newt = newt, t - quotient * newt
        r, newr = newr, r - quotient * newr
    if r > 1:
        return None
    if t < 0:
        t += m
    return t


def gcd(a: int, b: int) -> int:
    """Greatest common divisor of two u64 values."""
    check_width(a, 64, "a")
    check_width(b, 64, "b")
    return math.gcd(a, b)
