"""Prime supply and key pair generation for the 32-bit toy cryptosystem.

Primes are drawn from `[2**31, 2**32)` so that their product always fits 64 bits. Candidates go through trial
division against a cached table of small primes, then through a Miller-Rabin test that is deterministic for
anything below 2**64.

Typical usage example:

    p, q = genkey()
    p, q = genkey(TablePrimeSupplier(my_primes))
    get_pre_primes(12000)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import getpass
import hashlib
import itertools
import pathlib
import platform
import secrets
from typing import Iterable, Protocol
import warnings

from toyrsa import arith

EXP: int = 65537
PRIME_BITS: int = 32
PRIME_MIN: int = 2**(PRIME_BITS - 1)
PRIME_MAX: int = 2**PRIME_BITS - 1
GENKEY_ATTEMPT_CAP: int = 10000

_SMALL_PRIMES: list[int] = []
_SMALL_PRIMES_CAP: int = 0
_PRIME_DRAW_CAP: int = 2000
_MIN_TABLE_SIZE: int = 16
# Witnesses making Miller-Rabin exact below _DETERMINISTIC_LIMIT (first 12 primes).
_WITNESSES: tuple[int, ...] = (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37)
_DETERMINISTIC_LIMIT: int = 318665857834031151167461


class PrimeSupplier(Protocol):
    """Anything able to hand out primes in `[PRIME_MIN, PRIME_MAX]`."""

    def next_prime(self) -> int:
        ...


def hash_file(file: pathlib.Path, local: bool = True) -> str:
    """Hash a file and return its hash.

    Args:
        file: Target file to hash.
        local: Whether the file is local or not. Defaults to True.
            If False, does not pepper.

    Returns:
        The SHA-384 hex digest of the file.
    """
    base = hashlib.sha384()
    if local:
        # The pepper ties a digest to this user and machine, so a copied file needs a fresh digest.
        recipe = f"TOYRSA_PRIMES:{getpass.getuser()}@{platform.node()}+{platform.system()}"
        base.update(hashlib.sha384(recipe.encode()).digest())
    with open(file, "rb") as f:
        base.update(f.read())
    return base.hexdigest()


def _sieve(n: int = 10000) -> list[int]:
    """Sieve of Eratosthenes over the odd numbers, returning every prime up to `n`."""
    if n < 2:
        return []
    i_size = (n - 1) // 2
    candidate: list[bool] = [True] * i_size
    for i in range(int(n**0.5) // 2):
        if candidate[i]:
            r = 2 * i + 3
            for j in range((r * r - 3) // 2, i_size, r):
                candidate[j] = False
    return [2] + [(no * 2 + 3) for no, ele in enumerate(candidate) if ele]


def get_pre_primes(n: int = 10000, change: bool = False) -> list[int]:
    """Get the small primes, automatically generating if necessary.

    The module-level cache is regenerated when a larger bound is requested, when forced by `change`, or when it is
    empty.

    Args:
        n: The number up to which to generate primes. Defaults to 10000. Must be >= 0.
        change: Whether to force a recomputation of primes. Defaults to False.

    Returns:
        List of primes in ascending order, covering at least up to `n` unless `change` is True.

    Raises:
        ValueError: If `n` is negative.
    """
    if n < 0:
        raise ValueError("n must be >= 0")
    global _SMALL_PRIMES
    global _SMALL_PRIMES_CAP
    if n > _SMALL_PRIMES_CAP or change or not _SMALL_PRIMES:
        _SMALL_PRIMES = _sieve(n)
        _SMALL_PRIMES_CAP = n
    return _SMALL_PRIMES


def _write_prime_file(file: pathlib.Path, header: int, primes: Iterable[int]) -> tuple[str, str]:
    with open(file, "w", encoding="utf-8") as f:
        f.write(f"{header}\n")
        for p in primes:
            f.write(f"{p}\n")
    return hash_file(file, True), hash_file(file, False)


def _read_prime_file(file: pathlib.Path, sha: str, local: bool) -> tuple[int, list[int]]:
    if hash_file(file, local) != sha:
        raise RuntimeError("SHA-384 file verification failed.")
    with open(file, "r", encoding="utf-8") as f:
        header = int(f.readline().strip())
        primes = [int(line.strip()) for line in f if line.strip()]
    return header, primes


def _trial_division(no: int, n: int = 10000) -> bool:
    """Check `no` against the known small primes.

    Args:
         no: The number to check. Must be a non-negative integer.
         n: Bound passed to `get_pre_primes()`.

    Returns:
        False if `no` cannot be prime, True otherwise.
    """
    if no < 2:
        return False
    for prime in get_pre_primes(n):
        if prime**2 > no:
            return True
        if no % prime == 0:
            return False
    return True


def _miller_rabin(w: int, witnesses: Iterable[int]) -> bool:
    """Perform the Miller-Rabin test of `w` against each of `witnesses`.

    Args:
        w: Odd integer to be tested.
        witnesses: Bases to test against. Bases that are multiples of `w` are skipped.

    Returns:
        True if `w` is probably prime (exactly prime for the deterministic witness set), False otherwise.
    """
    if w <= 3:
        return w == 2 or w == 3
    tw = w - 1
    a = (tw & -tw).bit_length() - 1
    m = tw >> a
    for b in witnesses:
        if b % w == 0:
            continue
        z = pow(b, m, w)
        if z == 1 or z == w - 1:
            continue
        for _ in range(1, a):
            z = pow(z, 2, w)
            if z == w - 1:
                break
            if z == 1:
                return False
        else:
            return False
    return True


def check_prime(candidate: int, iters: None | int = None, n: int = 10000) -> bool:
    """Primality test: trial division by the primes up to `n`, followed by Miller-Rabin.

    Below 3.1 * 10**23, which covers every 32 and 64-bit candidate, the Miller-Rabin stage uses a fixed witness
    set and the answer is exact. Above it `iters` random witnesses are used.

    Args:
        candidate: The candidate prime to test.
        iters: Number of random Miller-Rabin witnesses for large candidates. Defaults to 40.
        n: Trial division bound, passed to `_trial_division()`.

    Returns:
        True if `candidate` is prime (probably prime for large candidates), False otherwise.
    """
    if candidate < 2:
        return False
    if not _trial_division(candidate, n):
        return False
    if candidate < _DETERMINISTIC_LIMIT:
        return _miller_rabin(candidate, _WITNESSES)
    if iters is None:
        iters = 40
    return _miller_rabin(candidate, (secrets.randbelow(candidate - 3) + 2 for _ in range(iters)))


class RandomPrimeSupplier:
    """Draws uniformly random primes in `[PRIME_MIN, PRIME_MAX]` from the system CSPRNG.

    Attributes:
        max_draws: Number of candidates to try before assuming the random source is broken.
    """

    def __init__(self, max_draws: int = _PRIME_DRAW_CAP) -> None:
        self.max_draws = max_draws

    def next_prime(self) -> int:
        """Return a fresh random prime.

        Raises:
            RuntimeError: If no prime turned up in `max_draws` candidates.
        """
        for _ in range(self.max_draws):
            # Top bit keeps the candidate in range, low bit keeps it odd.
            candidate = secrets.randbits(PRIME_BITS) | PRIME_MIN | 1
            if check_prime(candidate):
                return candidate
        raise RuntimeError(
            f"Run an improbable {self.max_draws} amount of draws with no prime found. Check system random number "
            "generator.")


class TablePrimeSupplier:
    """Draws primes from a precomputed table.

    Attributes:
        primes: The validated table, sorted and de-duplicated.
    """

    def __init__(self, primes: Iterable[int]) -> None:
        """Validate and store the table.

        Args:
            primes: The primes to draw from. Each must be a prime in `[PRIME_MIN, PRIME_MAX]`.

        Raises:
            ValueError: If an entry is out of range or composite, or fewer than two distinct primes remain.
        """
        table = sorted(set(primes))
        for p in table:
            if not PRIME_MIN <= p <= PRIME_MAX:
                raise ValueError(f"Table entry {p} is outside of [{PRIME_MIN}, {PRIME_MAX}].")
            if not check_prime(p):
                raise ValueError(f"Table entry {p} is not prime.")
        if len(table) < 2:
            raise ValueError("A prime table needs at least two distinct primes.")
        if len(table) < _MIN_TABLE_SIZE:
            warnings.warn(f"Prime table holds only {len(table)} primes, key pairs will repeat often.", RuntimeWarning)
        self.primes: tuple[int, ...] = tuple(table)

    def next_prime(self) -> int:
        return secrets.choice(self.primes)

    def export(self, file: pathlib.Path) -> tuple[str, str]:
        """Write the table to `file`, returning (Locally Peppered SHA-384, Standard SHA-384 hash)."""
        return _write_prime_file(file, len(self.primes), self.primes)

    @classmethod
    def import_table(cls, file: pathlib.Path, sha: str, local: bool = True) -> "TablePrimeSupplier":
        """Build a supplier from a file written by `export`.

        Args:
            file: The table file.
            sha: SHA-384 hash of the file to verify.
            local: Whether the digest is locally peppered. Defaults to True.

        Returns:
            The supplier.

        Raises:
            RuntimeError: If the digest does not match or the entry count disagrees with the header.
        """
        count, primes = _read_prime_file(file, sha, local)
        if count != len(primes):
            raise RuntimeError(f"Prime table announces {count} entries but holds {len(primes)}.")
        return cls(primes)


def _draw(supplier: PrimeSupplier) -> int:
    p = supplier.next_prime()
    if not PRIME_MIN <= p <= PRIME_MAX:
        raise ValueError(f"Prime supplier returned {p}, outside of [{PRIME_MIN}, {PRIME_MAX}].")
    if not check_prime(p):
        raise ValueError(f"Prime supplier returned composite {p}.")
    return p


def genkey(supplier: PrimeSupplier | None = None, max_attempts: int | None = GENKEY_ATTEMPT_CAP) -> tuple[int, int]:
    """Generate a private key `(p, q)` usable with the fixed public exponent `EXP`.

    Prime pairs are drawn until `EXP` is invertible modulo the totient `(p-1)(q-1)` and strictly smaller than it.
    Rejected pairs are discarded silently; failure needs the totient to be a multiple of 65537, so the expected
    number of draws is close to one.

    Args:
        supplier: Source of primes. Defaults to a fresh `RandomPrimeSupplier`.
        max_attempts: Safety valve on the number of pairs drawn. None retries without bound.

    Returns:
        The prime pair `(p, q)`. The public modulus is `p * q`.

    Raises:
        ValueError: If `max_attempts` is below 1 or the supplier breaks its contract.
        RuntimeError: If `max_attempts` pairs were all rejected.
    """
    if max_attempts is not None and max_attempts < 1:
        raise ValueError("max_attempts must be at least 1.")
    if supplier is None:
        supplier = RandomPrimeSupplier()
    attempts = itertools.count() if max_attempts is None else range(max_attempts)
    for _ in attempts:
        p = _draw(supplier)
        q = _draw(supplier)
        totient = arith.check_width((p - 1) * (q - 1), 64, "totient")
        if arith.mod_inverse(EXP, totient) is None:
            continue
        if EXP >= totient:
            continue
        if arith.gcd(EXP, totient) != 1:
            continue
        if p == q:
            continue
        return p, q
    raise RuntimeError(f"No usable prime pair found in {max_attempts} attempts. Check the prime supplier.")
