"""Textbook RSA encryption and decryption of single 32-bit messages.

The public key is the modulus `n = p * q` together with the fixed exponent `EXP`; the private key is the prime
pair itself, from which the private exponent is re-derived on every decryption. There is no padding, so this is
only ever suitable for teaching.

Typical usage example:

    p, q = genkey()
    c = encrypt(p * q, 42)
    m = decrypt((p, q), c)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from toyrsa import arith
from toyrsa.keygen import EXP


def _totient(key: tuple[int, int]) -> int:
    p, q = key
    arith.check_width(p, 32, "p")
    arith.check_width(q, 32, "q")
    return (p - 1) * (q - 1)


def private_exponent(key: tuple[int, int]) -> int:
    """Derives the private exponent `d` of a key pair.

    Args:
        key: The private key `(p, q)`.

    Returns:
        `d` such that `(EXP * d) % ((p-1)(q-1)) == 1`.

    Raises:
        OverflowError: If `p` or `q` does not fit in u32.
        RuntimeError: If `EXP` has no inverse modulo the totient, i.e. the pair was not produced by `genkey`.
    """
    d = arith.mod_inverse(EXP, _totient(key))
    if d is None:
        raise RuntimeError(f"Public exponent {EXP} has no inverse for key pair {key}. Not a valid key pair.")
    return d


def encrypt(n: int, message: int) -> int:
    """Encrypts `message` under the public modulus `n`.

    The caller is responsible for `message < n`, which holds for any u32 message and a modulus from `genkey`.

    Args:
        n: The public modulus `p * q`.
        message: The u32 plaintext.

    Returns:
        The u64 ciphertext, below `n`.

    Raises:
        OverflowError: If `message` is not u32 or `n` is not u64.
        ValueError: If `n` is zero.
    """
    arith.check_width(message, 32, "message")
    return arith.modexp(message, EXP, n)


def decrypt(key: tuple[int, int], ciphertext: int) -> int:
    """Decrypts `ciphertext` with the private key `(p, q)`.

    Args:
        key: The private key `(p, q)`.
        ciphertext: The u64 ciphertext.

    Returns:
        The u32 plaintext.

    Raises:
        RuntimeError: If the key pair is invalid for `EXP`.
        OverflowError: If an input is out of width, or the plaintext does not fit in u32.
    """
    d = private_exponent(key)
    p, q = key
    message = arith.modexp(ciphertext, d, p * q)
    return arith.check_width(message, 32, "plaintext")
