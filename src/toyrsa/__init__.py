"""A toy RSA cryptosystem over fixed-width integers.

Generates prime pairs in `[2**31, 2**32)`, uses the fixed public exponent 65537 and encrypts single 32-bit messages
via overflow-checked modular exponentiation. Academic use only: no padding, no key formats, no side-channel
hardening.

Typical usage example:

    p, q = genkey()
    c = encrypt(p * q, 1234)
    m = decrypt((p, q), c)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from toyrsa.arith import mod_inverse
from toyrsa.arith import modexp
from toyrsa.keygen import check_prime
from toyrsa.keygen import EXP
from toyrsa.keygen import genkey
from toyrsa.keygen import PrimeSupplier
from toyrsa.keygen import RandomPrimeSupplier
from toyrsa.keygen import TablePrimeSupplier
from toyrsa.rsa import decrypt
from toyrsa.rsa import encrypt
from toyrsa.rsa import private_exponent

__version__ = "0.1.0"
__all__ = [
    "EXP",
    "modexp",
    "mod_inverse",
    "check_prime",
    "genkey",
    "PrimeSupplier",
    "RandomPrimeSupplier",
    "TablePrimeSupplier",
    "encrypt",
    "decrypt",
    "private_exponent",
]
