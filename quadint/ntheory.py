import logging
import random
from itertools import combinations
from math import gcd, isqrt
from typing import Generator, Optional, Union

from sympy import divisors, factorint

from quadint.exceptions import (
    AlgebraicDegreeOverflowError,
    InvalidParameterError,
    NonEuclideanDomainError,
    NonUniqueFactorizationDomainError,
    NotDivisibleError,
)
from quadint.quad import QuadraticInteger
from quadint.ring import QuadraticRing
from quadint.utils import cache_generator, is_squarefree

_logger = logging.getLogger(__name__)

INT_OR_QUAD = Union[int, QuadraticInteger]

# Imaginary quadratic rings that are Euclidean for the norm. The list is complete.
NORM_EUCLIDEAN_DISCRIMINANTS = frozenset({-1, -2, -3, -7, -11})

# Imaginary quadratic rings with class number 1, i.e. unique factorization. Also complete.
HEEGNER_NUMBERS = frozenset({-1, -2, -3, -7, -11, -19, -43, -67, -163})


# region rational integers
def is_prime(n: INT_OR_QUAD) -> bool:
    """
    Primality of a rational integer by trial division, or of a quadratic integer in its ring.

    0 and the units are not prime; negative numbers are prime iff their absolute value is.

    Returns:
        bool: Whether n is prime.
    """
    if isinstance(n, QuadraticInteger):
        return _is_prime_quadratic(n)

    n = int(n)
    if n in (-1, 0, 1):
        return False
    if n in (-2, 2):
        return True
    if n % 2 == 0:
        return False

    m = abs(n)
    for k in range(3, isqrt(m) + 1, 2):
        if m % k == 0:
            return False

    return True


def prime_factors(n: INT_OR_QUAD) -> list:
    """
    Prime factorization of a rational integer, or of a quadratic integer in a UFD.

    For rational integers: the primes in ascending order with multiplicity, preceded by -1
    when n is negative. 0 gives [0] and 1 gives [].

    Raises:
        NonUniqueFactorizationDomainError: For a quadratic integer outside the UFD rings.

    Returns:
        list: The factors.
    """
    if isinstance(n, QuadraticInteger):
        return _prime_factors_quadratic(n)

    n = int(n)
    if n == 0:
        return [0]

    factors = [-1] if n < 0 else []
    for p, e in sorted(factorint(abs(n)).items()):
        factors.extend([int(p)] * e)

    return factors


def moebius_mu(n: int) -> int:
    """
    The Moebius function.

    Returns:
        int: 1 for +/-1, 0 if n is not squarefree, else (-1)^(number of prime factors).
    """
    n = int(n)
    if n in (-1, 1):
        return 1
    if not is_squarefree(n):
        return 0

    primes = [p for p in prime_factors(n) if p != -1]
    return -1 if len(primes) % 2 else 1


def symbol_legendre(a: int, p: int) -> int:
    """
    The Legendre symbol (a/p) by Euler's criterion, a^((p-1)/2) mod p.

    Raises:
        InvalidParameterError: If p is not an odd prime.

    Returns:
        int: -1, 0 or 1.
    """
    if not is_prime(p):
        raise InvalidParameterError(f"{p} is not a prime number. Consider using the Jacobi symbol instead.")
    if p in (-2, 2):
        raise InvalidParameterError(f"{p} is not an odd prime. Consider using the Kronecker symbol instead.")

    p = abs(p)
    power = pow(a % p, (p - 1) // 2, p)
    return -1 if power == p - 1 else power


def symbol_jacobi(n: int, m: int) -> int:
    """
    The Jacobi symbol (n/m), the product of the Legendre symbols over the prime factors of m.

    Raises:
        InvalidParameterError: If m is even or negative.

    Returns:
        int: -1, 0 or 1.
    """
    if m % 2 == 0:
        raise InvalidParameterError(f"{m} is not an odd number. Consider using the Kronecker symbol instead.")
    if m < 0:
        raise InvalidParameterError(f"{m} is not a positive number. Consider using the Kronecker symbol instead.")
    if m == 1:
        return 1
    if gcd(n, m) > 1:
        return 0

    symbol = 1
    for p in prime_factors(m):
        symbol *= symbol_legendre(n, p)

    return symbol


def _symbol_kronecker_two(n: int) -> int:
    """(n/2): 1 for n = +/-1 mod 8, -1 for n = +/-3 mod 8, 0 for even n."""
    r = n % 8
    if r in (1, 7):
        return 1
    if r in (3, 5):
        return -1
    return 0


def symbol_kronecker(n: int, m: int) -> int:
    """
    The Kronecker symbol (n/m), defined for every integer modulus.

    The factor -1 of m contributes the sign of n, each factor 2 contributes (n/2), and the
    odd prime factors contribute Legendre symbols.

    Returns:
        int: -1, 0 or 1.
    """
    if gcd(n, m) > 1:
        return 0
    if m == 1:
        return 1
    if m == 0:
        return 1 if n in (-1, 1) else 0

    symbol = 1
    for p in prime_factors(m):
        if p == -1:
            symbol *= -1 if n < 0 else 1
        elif p == 2:
            symbol *= _symbol_kronecker_two(n)
        else:
            symbol *= symbol_legendre(n, p)

    return symbol


def random_negative_squarefree(bound: int) -> int:
    """
    A random negative squarefree integer no smaller than -|bound|.

    Raises:
        InvalidParameterError: If bound is 0.

    Returns:
        int: The number, suitable as the d of a QuadraticRing.
    """
    bound = abs(int(bound))
    if bound == 0:
        raise InvalidParameterError("bound must be nonzero")

    n = -random.randint(1, bound)
    # Terminates: -1 is squarefree
    while not is_squarefree(n):
        n += 1

    return n
# endregion


RING_GAUSSIAN = QuadraticRing(-1)
RING_EISENSTEIN = QuadraticRing(-3)
IMAGINARY_UNIT = QuadraticInteger(0, 1, RING_GAUSSIAN)
PRIMITIVE_SIXTH_ROOT_OF_UNITY = QuadraticInteger(1, 1, RING_EISENSTEIN, 2)
COMPLEX_CUBIC_ROOT_OF_UNITY = QuadraticInteger(-1, 1, RING_EISENSTEIN, 2)


def field_discriminant(ring: QuadraticRing) -> int:
    """d when d = 1 (mod 4), otherwise 4d."""
    return ring.d if ring.has_half_integers else 4 * ring.d


# region GCD
def euclidean_gcd(a: INT_OR_QUAD, b: INT_OR_QUAD) -> INT_OR_QUAD:
    """
    Greatest common divisor by the Euclidean algorithm.

    Two ints give the usual non-negative integer gcd. If either argument is a
    QuadraticInteger, a plain int on the other side is lifted into its ring and the
    Euclidean algorithm runs in that ring, which must be norm-Euclidean.

    Raises:
        AlgebraicDegreeOverflowError: If both have imaginary parts from different rings.
        NonEuclideanDomainError: If the ring is not one of the norm-Euclidean rings.
        ArithmeticOverflowError: If an intermediate value is out of range.

    Returns:
        The gcd, an int or the canonical associate (see _is_canonical) of the
        quadratic gcd, so the result does not depend on the order of the arguments.
    """
    if not isinstance(a, QuadraticInteger) and not isinstance(b, QuadraticInteger):
        return gcd(int(a), int(b))

    if not isinstance(a, QuadraticInteger):
        a = QuadraticInteger(a, 0, b.ring)
    if not isinstance(b, QuadraticInteger):
        b = QuadraticInteger(b, 0, a.ring)

    return _euclidean_gcd_quadratic(a, b)


def _gcd_operands(a: QuadraticInteger, b: QuadraticInteger) -> tuple[QuadraticInteger, QuadraticInteger]:
    """
    Both operands moved into the ring the gcd is computed in.

    A rational integer is the same number in every ring, so it follows the other
    operand. When both are rational, a norm-Euclidean ring is preferred, whichever
    side it came from.

    Raises:
        AlgebraicDegreeOverflowError: If both have imaginary parts from different rings.
    """
    if a.imag and b.imag and a.ring != b.ring:
        raise AlgebraicDegreeOverflowError("This operation would result in an algebraic integer of degree 4", (a, b))

    if a.imag:
        ring = a.ring
    elif b.imag:
        ring = b.ring
    elif a.ring.d not in NORM_EUCLIDEAN_DISCRIMINANTS and b.ring.d in NORM_EUCLIDEAN_DISCRIMINANTS:
        ring = b.ring
    else:
        ring = a.ring

    if not a.imag:
        a = QuadraticInteger(a.real, 0, ring)
    if not b.imag:
        b = QuadraticInteger(b.real, 0, ring)
    return a, b


def _units(ring: QuadraticRing) -> list[QuadraticInteger]:
    """The units of the ring: powers of i, of (1 + sqrt(-3))/2, or just +/-1."""
    one = QuadraticInteger(1, 0, ring)
    if ring.d == -1:
        generator, order = IMAGINARY_UNIT, 4
    elif ring.d == -3:
        generator, order = PRIMITIVE_SIXTH_ROOT_OF_UNITY, 6
    else:
        generator, order = -one, 2

    units = [one]
    while len(units) < order:
        units.append(units[-1].times(generator))
    return units


def _is_canonical(z: QuadraticInteger) -> bool:
    """
    Exactly one associate of each nonzero number passes:

    * Z[i]: real part positive, imaginary part not negative.
    * Z[omega]: argument in [0, 60) degrees.
    * elsewhere: real part positive, or real part zero and imaginary part positive.
    """
    if z.ring.d == -3:
        return 0 <= z.twice_imag < z.twice_real
    if z.ring.d == -1:
        return z.real > 0 and z.imag >= 0
    return z.real > 0 or (not z.real and z.imag > 0)


def _canonical_associate(z: QuadraticInteger) -> QuadraticInteger:
    if not z:
        return z

    return next(w for w in (z.times(unit) for unit in _units(z.ring)) if _is_canonical(w))


def _try_remainder(a: QuadraticInteger, b: QuadraticInteger) -> Optional[QuadraticInteger]:
    """
    a - q*b for a quotient q that makes the remainder norm smaller than the norm of b.

    Returns:
        The remainder, or None if neither the exact quotient nor a nearby ring element works.
    """
    try:
        q = a.divides(b)
    except NotDivisibleError as nde:
        limit = b.norm()
        for q in [nde.round_toward_zero(), *nde.bounding_integers()]:
            r = a.minus(q.times(b))
            if r.norm() < limit:
                return r

        return None

    return a.minus(q.times(b))


def _euclidean_remainder(a: QuadraticInteger, b: QuadraticInteger) -> QuadraticInteger:
    """
    Like _try_remainder, for rings where the descent cannot get stuck.

    Raises:
        ArithmeticError: If no nearby quotient shrinks the norm.
    """
    r = _try_remainder(a, b)
    if r is None:
        raise ArithmeticError(f"Euclidean descent failed for {a} and {b}")

    return r


def _euclidean_gcd_quadratic(a: QuadraticInteger, b: QuadraticInteger) -> QuadraticInteger:
    a, b = _gcd_operands(a, b)
    if a.ring.d not in NORM_EUCLIDEAN_DISCRIMINANTS:
        raise NonEuclideanDomainError(f"{a} and {b} are in non-Euclidean domain {a.ring}", a, b)

    if a.norm() < b.norm():
        a, b = b, a

    while b:
        _logger.debug("gcd step: %s, %s", a, b)
        a, b = b, _euclidean_remainder(a, b)

    return _canonical_associate(a)


def _ideal_norm(a: QuadraticInteger, b: QuadraticInteger) -> int:
    """
    The norm of the ideal generated by a and b, i.e. its index in the ring.

    In the integral basis {1, w}, w = sqrt(d) or (1 + sqrt(d))/2, the ideal is the lattice
    spanned by a, a*w, b and b*w, and its index is the gcd of the 2x2 minors.
    """
    ring = a.ring

    vectors = []
    for z in (a, b):
        # Doubled coordinates (A, B) meaning (A + B*sqrt(d))/2
        A, B = z.twice_real, z.twice_imag
        if ring.has_half_integers:
            doubled = [(A, B), ((A + B * ring.d) // 2, (A + B) // 2)]
        else:
            doubled = [(A, B), (B * ring.d, A)]

        for A, B in doubled:
            if ring.has_half_integers:
                vectors.append(((A - B) // 2, B))
            else:
                vectors.append((A // 2, B // 2))

    n = 0
    for (x1, y1), (x2, y2) in combinations(vectors, 2):
        n = gcd(n, x1 * y2 - x2 * y1)
    return n


def _principal_generator(a: QuadraticInteger, b: QuadraticInteger) -> Optional[QuadraticInteger]:
    """A common divisor of a and b whose norm is the norm of their ideal, if there is one."""
    for candidate in elements_of_norm(a.ring, _ideal_norm(a, b)):
        try:
            a.divides(candidate)
            b.divides(candidate)
        except NotDivisibleError:
            continue
        return candidate

    return None


def euclidean_gcd_best_effort(a: QuadraticInteger, b: QuadraticInteger) -> QuadraticInteger:
    """
    Greatest common divisor in any ring, norm-Euclidean or not.

    The Euclidean descent runs as long as some nearby quotient shrinks the remainder.
    If it gets stuck, the gcd exists iff the ideal (a, b) is principal, and a generator
    is searched among the elements whose norm is the norm of that ideal.

    In Z[sqrt(-5)], gcd(29, 12 + 8*sqrt(-5)) = 3 + 2*sqrt(-5) is found that way, while
    (2, 1 + sqrt(-5)) is not principal and has no gcd.

    Raises:
        AlgebraicDegreeOverflowError: If both have imaginary parts from different rings.
        ArithmeticOverflowError: If an intermediate value is out of range.

    Returns:
        QuadraticInteger: The canonical gcd when there is one. Otherwise the number the
            descent got stuck on, negated if its real part is positive, so a negative
            real part flags the failure.
    """
    a, b = _gcd_operands(a, b)
    if a.exact_norm() < b.exact_norm():
        a, b = b, a

    while b:
        r = _try_remainder(a, b)
        if r is None:
            _logger.debug("Euclidean descent stuck at %s, %s in %s", a, b, a.ring)
            generator = _principal_generator(a, b)
            if generator is not None:
                return _canonical_associate(generator)

            _logger.debug("(%s, %s) is not a principal ideal of %s", a, b, a.ring)
            return -b if b.real > 0 else b

        a, b = b, r

    return _canonical_associate(a)
# endregion


# region primality and factorization
def _is_prime_quadratic(z: QuadraticInteger) -> bool:
    if is_prime(z.norm()):
        return True

    d = z.ring.d
    if z.imag:
        # Outside Z[i] and Z[omega] the only units are +/-1, so a prime with nonzero
        # imaginary part must have prime norm.
        if d == -1 and not z.real:
            b = abs(z.imag)
            return is_prime(b) and b % 4 == 3

        if d == -3:
            rotated = z
            for _ in range(2):
                rotated = rotated.times(COMPLEX_CUBIC_ROOT_OF_UNITY)
                if not rotated.imag:
                    r = abs(rotated.real)
                    return is_prime(r) and r % 3 == 2

        return False

    # A rational prime stays prime iff it is inert
    r = abs(z.real)
    return is_prime(r) and symbol_kronecker(field_discriminant(z.ring), r) == -1


@cache_generator
def elements_of_norm(ring: QuadraticRing, norm: int) -> Generator[QuadraticInteger, None, None]:
    """
    All elements of the ring with the given norm, one of each pair z, -z.

    Ordered by the absolute value of the imaginary part; each element with both parts
    nonzero is followed by its conjugate.

    Returns:
        Generator: The elements.
    """
    if ring.has_half_integers:
        target, den = 4 * norm, 2
    else:
        target, den = norm, 1

    b = 0
    while ring.abs_d * b * b <= target:
        rest = target - ring.abs_d * b * b
        a = isqrt(rest)
        if a * a == rest and (den == 1 or ((a ^ b) & 1) == 0):
            yield QuadraticInteger(a, b, ring, den)
            if a and b:
                yield QuadraticInteger(a, -b, ring, den)
        b += 1


def is_irreducible(z: QuadraticInteger) -> bool:
    """
    True iff z is not zero, not a unit, and not a product of two non-units.

    In the UFD rings this coincides with is_prime; elsewhere an irreducible number need not
    be prime (2 in Z[sqrt(-5)] divides (1 + sqrt(-5))(1 - sqrt(-5)) but neither factor).

    Returns:
        bool: Whether z is irreducible.
    """
    n = z.norm()
    if is_prime(n):
        return True
    if n < 2:
        return False
    if z.ring.d in HEEGNER_NUMBERS:
        return is_prime(z)

    for m in divisors(n)[1:-1]:
        if m * m > n:
            break
        for candidate in elements_of_norm(z.ring, m):
            try:
                z.divides(candidate)
            except NotDivisibleError:
                continue
            return False

    return True


def _trial_division(z: QuadraticInteger) -> tuple[QuadraticInteger, list[QuadraticInteger], bool]:
    """
    Split z into irreducibles by trial division with divisors of growing norm.

    Candidate norms are the divisors of N(z). Every norm is exhausted before the next, so a
    candidate that divides what is left is irreducible. Once the candidate norm exceeds the
    square root of the remaining norm, the remainder itself is irreducible.

    Returns:
        tuple: (unit, irreducible factors, whether some factor is irreducible but not prime).
    """
    n = z
    factors: list[QuadraticInteger] = []
    ambiguous = False

    for m in divisors(z.norm())[1:]:
        if m * m > n.norm():
            break

        for candidate in elements_of_norm(z.ring, m):
            while n.norm() % m == 0:
                try:
                    n = n.divides(candidate)
                except NotDivisibleError:
                    break

                factors.append(candidate)
                if not is_prime(candidate):
                    _logger.debug("%s is irreducible but not prime in %s", candidate, z.ring)
                    ambiguous = True

    if n.norm() > 1:
        factors.append(n)
        if not is_prime(n):
            _logger.debug("%s is irreducible but not prime in %s", n, z.ring)
            ambiguous = True
        n = QuadraticInteger(1, 0, z.ring)

    return n, factors, ambiguous


def _arrange_factors(unit: QuadraticInteger, factors: list[QuadraticInteger]) -> list[QuadraticInteger]:
    """
    Sort by norm and move signs into the unit.

    Each factor ends with positive real part, or zero real part and positive imaginary part;
    the unit leads the list unless it is 1.
    """
    arranged = []
    for factor in sorted(factors, key=lambda f: f.norm()):
        if factor.real < 0 or (not factor.real and factor.imag < 0):
            factor = -factor
            unit = -unit
        arranged.append(factor)

    if not unit.equals_int(1):
        arranged.insert(0, unit)

    return arranged


def _prime_factors_quadratic(z: QuadraticInteger) -> list[QuadraticInteger]:
    if z.ring.d not in HEEGNER_NUMBERS:
        raise NonUniqueFactorizationDomainError(f"{z.ring} is not a unique factorization domain", z)

    if z.norm() < 2:
        return [z]

    unit, factors, _ = _trial_division(z)
    return _arrange_factors(unit, factors)


def factorize_best_effort(z: QuadraticInteger) -> list[QuadraticInteger]:
    """
    Factor z into irreducibles in any ring, unique factorization or not.

    When some factor is irreducible but not prime, the factorization found is one of
    several, and the list is prefixed with the unit -1 twice to flag it.

    Returns:
        list: The factors; the product is z.
    """
    if z.norm() < 2:
        return [z]

    unit, factors, ambiguous = _trial_division(z)
    arranged = _arrange_factors(unit, factors)
    if ambiguous:
        minus_one = QuadraticInteger(-1, 0, z.ring)
        arranged[:0] = [minus_one, minus_one]

    _logger.debug("best-effort factorization of %s in %s: %s", z, z.ring, arranged)
    return arranged
# endregion
