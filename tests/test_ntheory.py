import logging
from functools import reduce
from operator import mul

import pytest

from quadint import (
    COMPLEX_CUBIC_ROOT_OF_UNITY,
    IMAGINARY_UNIT,
    RING_GAUSSIAN,
    AlgebraicDegreeOverflowError,
    InvalidParameterError,
    NonEuclideanDomainError,
    NonUniqueFactorizationDomainError,
    QuadraticInteger,
    QuadraticRing,
    euclidean_gcd,
    euclidean_gcd_best_effort,
    factorize_best_effort,
    field_discriminant,
    is_irreducible,
    is_prime,
    is_squarefree,
    moebius_mu,
    prime_factors,
    random_negative_squarefree,
    symbol_jacobi,
    symbol_kronecker,
    symbol_legendre,
)
from quadint.ntheory import elements_of_norm

SMALL_PRIMES = [2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41, 43, 47, 53, 59, 61, 67, 71, 73, 79, 83, 89, 97]


def _elements(ring: QuadraticRing, bound: int) -> list[QuadraticInteger]:
    """Every element with parts in [-bound, bound], half-integers included"""
    res = []
    for a in range(-bound, bound + 1):
        for b in range(-bound, bound + 1):
            res.append(QuadraticInteger(a, b, ring))
            if ring.has_half_integers and a & 1 and b & 1:
                res.append(QuadraticInteger(a, b, ring, 2))
    return res


class TestRationalIntegers:
    """Tests for the functions on plain ints"""

    def test_is_prime(self):
        """Trial division agrees with a list of small primes"""
        for n in range(-100, 100):
            assert is_prime(n) == (abs(n) in SMALL_PRIMES)

    def test_is_prime_large(self):
        """The largest signed 32-bit int is a Mersenne prime"""
        assert is_prime(2 ** 31 - 1)
        assert not is_prime(2 ** 31 - 3)  # 5 * 429496729

    def test_prime_factors(self):
        """Ascending primes with multiplicity, -1 first for negatives"""
        assert prime_factors(360) == [2, 2, 2, 3, 3, 5]
        assert prime_factors(-12) == [-1, 2, 2, 3]
        assert prime_factors(97) == [97]
        assert prime_factors(-1) == [-1]
        assert prime_factors(1) == []
        assert prime_factors(0) == [0]

    def test_is_squarefree(self):
        """0 is not squarefree, the units are"""
        for n in (-1, 1, 2, -7, 30, -105):
            assert is_squarefree(n)
        for n in (0, 4, 12, -18, 49, -125):
            assert not is_squarefree(n)

    def test_moebius_mu(self):
        """Parity of the number of prime factors, or 0"""
        assert moebius_mu(1) == 1
        assert moebius_mu(-1) == 1
        assert moebius_mu(-2) == -1
        assert moebius_mu(6) == 1
        assert moebius_mu(30) == -1
        assert moebius_mu(12) == 0
        assert moebius_mu(0) == 0

    def test_legendre(self):
        """Known values of (10/p)"""
        assert symbol_legendre(10, 7) == -1
        assert symbol_legendre(10, 3) == 1
        assert symbol_legendre(10, 5) == 0

    def test_legendre_quadratic_residues(self):
        """1 for nonzero squares, -1 for non-squares, 0 for multiples of p"""
        for p in SMALL_PRIMES[1:15]:
            squares = {x * x % p for x in range(1, p)}
            for a in range(-p, 2 * p):
                if a % p == 0:
                    expected = 0
                else:
                    expected = 1 if a % p in squares else -1
                assert symbol_legendre(a, p) == expected

    def test_legendre_bad_modulus(self):
        """The modulus must be an odd prime"""
        with pytest.raises(InvalidParameterError):
            symbol_legendre(3, 2)
        with pytest.raises(InvalidParameterError):
            symbol_legendre(3, 9)

    def test_jacobi(self):
        """Known values of the Jacobi symbol"""
        assert symbol_jacobi(2, 15) == 1
        assert symbol_jacobi(2, 9) == 1
        assert symbol_jacobi(3, 9) == 0
        assert symbol_jacobi(5, 1) == 1

    def test_jacobi_bad_modulus(self):
        """The modulus must be odd and positive"""
        with pytest.raises(InvalidParameterError):
            symbol_jacobi(1, 4)
        with pytest.raises(InvalidParameterError):
            symbol_jacobi(1, -3)

    def test_kronecker(self):
        """Known values of the Kronecker symbol"""
        assert [symbol_kronecker(n, 2) for n in (1, 3, 5, 7, 4)] == [1, -1, -1, 1, 0]
        assert symbol_kronecker(-3, 2) == -1
        assert symbol_kronecker(-7, 2) == 1
        assert symbol_kronecker(-20, 2) == 0
        assert symbol_kronecker(-1, -1) == -1
        assert symbol_kronecker(1, -1) == 1
        assert symbol_kronecker(1, 0) == 1
        assert symbol_kronecker(5, 0) == 0
        assert symbol_kronecker(0, 1) == 1

    def test_kronecker_extends_jacobi(self):
        """For odd positive moduli the Kronecker symbol is the Jacobi symbol"""
        for n in range(-10, 11):
            for m in range(1, 30, 2):
                assert symbol_kronecker(n, m) == symbol_jacobi(n, m)

    def test_gcd(self):
        """Two ints give the usual gcd"""
        assert euclidean_gcd(12, 18) == 6
        assert euclidean_gcd(-12, 18) == 6
        assert euclidean_gcd(0, 5) == 5
        assert euclidean_gcd(0, 0) == 0

    def test_random_negative_squarefree(self):
        """Results are valid radicands"""
        for _ in range(50):
            d = random_negative_squarefree(100)
            assert -100 <= d <= -1
            assert is_squarefree(d)
            assert QuadraticRing(d).d == d

        with pytest.raises(InvalidParameterError):
            random_negative_squarefree(0)


class TestConstants:
    """Tests for the predefined rings and units"""

    def test_units(self):
        """i^2 = -1 and omega^3 = 1"""
        assert IMAGINARY_UNIT ** 2 == -1
        assert COMPLEX_CUBIC_ROOT_OF_UNITY ** 3 == 1
        assert RING_GAUSSIAN == QuadraticRing(-1)

    def test_field_discriminant(self):
        """d or 4d"""
        assert field_discriminant(QuadraticRing(-1)) == -4
        assert field_discriminant(QuadraticRing(-3)) == -3
        assert field_discriminant(QuadraticRing(-5)) == -20
        assert field_discriminant(QuadraticRing(-7)) == -7

    def test_elements_of_norm(self):
        """One of each pair z, -z, conjugates adjacent"""
        ring = QuadraticRing(-1)
        expected = [
            QuadraticInteger(2, 1, ring),
            QuadraticInteger(2, -1, ring),
            QuadraticInteger(1, 2, ring),
            QuadraticInteger(1, -2, ring),
        ]
        assert list(elements_of_norm(ring, 5)) == expected
        # Served from the cache the second time
        assert list(elements_of_norm(ring, 5)) == expected

    def test_elements_of_norm_half_integers(self):
        """Half-integers are found in rings that have them"""
        ring = QuadraticRing(-7)
        assert list(elements_of_norm(ring, 2)) == [
            QuadraticInteger(1, 1, ring, 2),
            QuadraticInteger(1, -1, ring, 2),
        ]
        assert list(elements_of_norm(QuadraticRing(-5), 3)) == []


class TestIsPrime:
    """Tests for is_prime on quadratic integers"""

    def test_gaussian(self):
        """Split, inert and ramified primes of Z[i]"""
        ring = QuadraticRing(-1)
        assert is_prime(QuadraticInteger(2, 1, ring))
        assert is_prime(QuadraticInteger(1, 1, ring))
        assert is_prime(QuadraticInteger(3, 0, ring))
        assert is_prime(QuadraticInteger(-7, 0, ring))
        assert not is_prime(QuadraticInteger(2, 0, ring))
        assert not is_prime(QuadraticInteger(5, 0, ring))
        assert not is_prime(QuadraticInteger(1, 0, ring))
        assert not is_prime(QuadraticInteger(0, 0, ring))

    def test_gaussian_imaginary(self):
        """b*i is prime iff |b| is a prime = 3 (mod 4)"""
        ring = QuadraticRing(-1)
        assert is_prime(QuadraticInteger(0, 3, ring))
        assert is_prime(QuadraticInteger(0, -7, ring))
        assert not is_prime(QuadraticInteger(0, 5, ring))
        assert not is_prime(QuadraticInteger(0, 15, ring))

    def test_eisenstein(self):
        """2 and 5 stay prime, 3 and 7 do not"""
        ring = QuadraticRing(-3)
        assert is_prime(QuadraticInteger(2, 0, ring))
        assert is_prime(QuadraticInteger(5, 0, ring))
        assert not is_prime(QuadraticInteger(3, 0, ring))
        assert not is_prime(QuadraticInteger(7, 0, ring))

    def test_eisenstein_associates(self):
        """Associates of the inert prime 2 are prime"""
        ring = QuadraticRing(-3)
        assert is_prime(QuadraticInteger(-1, 1, ring))
        assert is_prime(QuadraticInteger(1, 1, ring))
        assert is_prime(QuadraticInteger(2, 0, ring) * COMPLEX_CUBIC_ROOT_OF_UNITY)

    def test_non_ufd(self):
        """In Z[sqrt(-5)] 2 and 3 are not prime, but 11 is"""
        ring = QuadraticRing(-5)
        assert not is_prime(QuadraticInteger(2, 0, ring))
        assert not is_prime(QuadraticInteger(3, 0, ring))
        assert not is_prime(QuadraticInteger(1, 1, ring))
        assert is_prime(QuadraticInteger(11, 0, ring))
        assert is_prime(QuadraticInteger(3, 2, ring))

    def test_prime_norm(self):
        """Every element of prime norm is prime"""
        for d in (-1, -2, -3, -5, -7, -19):
            ring = QuadraticRing(d)
            for z in _elements(ring, 6):
                if is_prime(z.norm()):
                    assert is_prime(z)


class TestIsIrreducible:
    """Tests for is_irreducible"""

    def test_non_ufd(self):
        """Irreducible elements of Z[sqrt(-5)] that are not prime"""
        ring = QuadraticRing(-5)
        assert is_irreducible(QuadraticInteger(2, 0, ring))
        assert is_irreducible(QuadraticInteger(3, 0, ring))
        assert is_irreducible(QuadraticInteger(1, 1, ring))
        assert not is_irreducible(QuadraticInteger(6, 0, ring))
        assert not is_irreducible(QuadraticInteger(9, 0, ring))

    def test_zero_and_units(self):
        """Neither zero nor the units are irreducible"""
        ring = QuadraticRing(-5)
        assert not is_irreducible(QuadraticInteger(0, 0, ring))
        assert not is_irreducible(QuadraticInteger(1, 0, ring))
        assert not is_irreducible(QuadraticInteger(-1, 0, ring))

    def test_ufd(self):
        """In a UFD irreducible means prime"""
        ring = QuadraticRing(-1)
        assert is_irreducible(QuadraticInteger(3, 0, ring))
        assert not is_irreducible(QuadraticInteger(5, 0, ring))


class TestEuclideanGcd:
    """Tests for euclidean_gcd on quadratic integers"""

    def test_gaussian(self):
        """gcd(5, 3 + i) = 1 + 2i, the associate of 2 - i in the first quadrant"""
        ring = QuadraticRing(-1)
        a = QuadraticInteger(5, 0, ring)
        b = QuadraticInteger(3, 1, ring)

        assert euclidean_gcd(a, b) == QuadraticInteger(1, 2, ring)
        assert euclidean_gcd(b, a) == QuadraticInteger(1, 2, ring)

    def test_gaussian_rotation(self):
        """A purely imaginary result is rotated onto the real axis"""
        ring = QuadraticRing(-1)
        assert euclidean_gcd(QuadraticInteger(0, 2, ring), QuadraticInteger(0, 4, ring)) == 2

    def test_ramified(self):
        """gcd(sqrt(-2), -2) = sqrt(-2)"""
        ring = QuadraticRing(-2)
        assert euclidean_gcd(QuadraticInteger(0, 1, ring), QuadraticInteger(-2, 0, ring)) == QuadraticInteger(0, 1, ring)
        assert euclidean_gcd(QuadraticInteger(0, 3, ring), QuadraticInteger(0, 5, ring)) == QuadraticInteger(0, 1, ring)

    def test_eisenstein(self):
        """2 is inert, so gcd(6, 4) = 2"""
        ring = QuadraticRing(-3)
        assert euclidean_gcd(QuadraticInteger(6, 0, ring), QuadraticInteger(4, 0, ring)) == 2

    def test_half_integers(self):
        """Results with denominator 2"""
        ring = QuadraticRing(-7)
        g = QuadraticInteger(1, 1, ring, 2)
        assert euclidean_gcd(g * 3, QuadraticInteger(2, 0, ring)) == g

        ring = QuadraticRing(-11)
        g = QuadraticInteger(1, 1, ring, 2)
        assert euclidean_gcd(g * 2, g * 5) == g

    def test_int_operand(self):
        """A plain int is lifted into the ring of the other operand"""
        ring = QuadraticRing(-1)
        assert euclidean_gcd(5, QuadraticInteger(2, 1, ring)) == QuadraticInteger(2, 1, ring)

    def test_zero(self):
        """gcd(z, 0) = z"""
        ring = QuadraticRing(-1)
        z = QuadraticInteger(3, 1, ring)
        assert euclidean_gcd(z, QuadraticInteger(0, 0, ring)) == z
        assert euclidean_gcd(QuadraticInteger(0, 0, ring), z) == z

    def test_common_divisor(self):
        """The gcd divides both arguments and is divisible by a known common factor"""
        for d in (-1, -2, -3, -7, -11):
            ring = QuadraticRing(d)
            common = next(iter(elements_of_norm(ring, 2 if d in (-1, -2, -7) else 3)))
            zs = _elements(ring, 3)
            for x in zs[::3]:
                for y in zs[1::4]:
                    a, b = x * common, y * common
                    g = euclidean_gcd(a, b)
                    if not g:
                        continue

                    assert g.real >= 0
                    a.divides(g)
                    b.divides(g)
                    g.divides(common)

    def test_self(self):
        """gcd(z, z) is an associate of z"""
        for d in (-1, -2, -3, -7, -11):
            ring = QuadraticRing(d)
            for z in _elements(ring, 4):
                if not z:
                    continue
                g = euclidean_gcd(z, z)
                assert g.norm() == z.norm()
                z.divides(g)

    def test_commutative(self):
        """Operands of equal norm give the same gcd in either order"""
        ring = QuadraticRing(-1)
        a, b = QuadraticInteger(1, 1, ring), QuadraticInteger(1, -1, ring)
        assert euclidean_gcd(a, b) == QuadraticInteger(1, 1, ring)
        assert euclidean_gcd(b, a) == QuadraticInteger(1, 1, ring)

        ring = QuadraticRing(-2)
        a, b = QuadraticInteger(0, 1, ring), QuadraticInteger(0, -1, ring)
        assert euclidean_gcd(a, b) == QuadraticInteger(0, 1, ring)
        assert euclidean_gcd(b, a) == QuadraticInteger(0, 1, ring)

        for d in (-1, -2, -3, -7, -11):
            ring = QuadraticRing(d)
            zs = _elements(ring, 3)
            for x in zs[::2]:
                for y in zs[1::3]:
                    assert euclidean_gcd(x, y) == euclidean_gcd(y, x)

    def test_canonical_associate(self):
        """Associates of one number all have the same gcd with 0"""
        ring = QuadraticRing(-3)
        z = QuadraticInteger(5, 3, ring, 2)
        unit = QuadraticInteger(1, 1, ring, 2)
        results = set()
        for _ in range(6):
            results.add(euclidean_gcd(z, 0))
            z = z * unit
        assert len(results) == 1

        g = results.pop()
        assert 0 <= g.twice_imag < g.twice_real

        ring = QuadraticRing(-1)
        for z in (QuadraticInteger(2, 3, ring), QuadraticInteger(-3, 2, ring), QuadraticInteger(-2, -3, ring)):
            assert euclidean_gcd(z, 0) == QuadraticInteger(2, 3, ring)

    def test_rational_operands(self):
        """Two rational operands from different rings meet in the same ring either way"""
        a = QuadraticInteger(6, 0, QuadraticRing(-1))
        b = QuadraticInteger(4, 0, QuadraticRing(-5))
        assert euclidean_gcd(a, b) == 2
        assert euclidean_gcd(b, a) == 2
        assert euclidean_gcd(a, b).ring == euclidean_gcd(b, a).ring

    def test_non_euclidean(self):
        """Z[sqrt(-5)] is not Euclidean"""
        ring = QuadraticRing(-5)
        with pytest.raises(NonEuclideanDomainError):
            euclidean_gcd(QuadraticInteger(2, 0, ring), QuadraticInteger(1, 1, ring))

    def test_non_euclidean_large_norm(self):
        """A norm beyond 32 bits still reports the ring, not an overflow"""
        ring = QuadraticRing(-5)
        big = QuadraticInteger(40000, 40000, ring)
        with pytest.raises(NonEuclideanDomainError) as exc_info:
            euclidean_gcd(QuadraticInteger(3, 1, ring), big)
        assert exc_info.value.operands[0] == big

    def test_degree_overflow(self):
        """Imaginary parts from two rings have no common ring"""
        with pytest.raises(AlgebraicDegreeOverflowError):
            euclidean_gcd(QuadraticInteger(1, 1, QuadraticRing(-1)), QuadraticInteger(1, 1, QuadraticRing(-2)))


class TestEuclideanGcdBestEffort:
    """Tests for euclidean_gcd_best_effort"""

    def test_euclidean_rings(self):
        """Agrees with euclidean_gcd where the descent always works"""
        ring = QuadraticRing(-1)
        assert euclidean_gcd_best_effort(QuadraticInteger(5, 0, ring), QuadraticInteger(3, 1, ring)) == \
            QuadraticInteger(1, 2, ring)

        ring = QuadraticRing(-7)
        g = QuadraticInteger(1, 1, ring, 2)
        assert euclidean_gcd_best_effort(g * 3, QuadraticInteger(2, 0, ring)) == g

    def test_descent_finishes(self):
        """The descent can succeed in a ring that is not Euclidean"""
        ring = QuadraticRing(-5)
        assert euclidean_gcd_best_effort(QuadraticInteger(6, 0, ring), QuadraticInteger(4, 0, ring)) == 2

    def test_principal_ideal(self):
        """A stuck descent is rescued by a generator of the ideal"""
        ring = QuadraticRing(-5)
        g = euclidean_gcd_best_effort(QuadraticInteger(29, 0, ring), QuadraticInteger(12, 8, ring))
        assert g == QuadraticInteger(3, 2, ring)

        ring = QuadraticRing(-19)
        g = QuadraticInteger(1, 1, ring, 2)
        assert euclidean_gcd_best_effort(g * 3, g * 7) == g

    def test_not_principal(self):
        """(2, 1 + sqrt(-5)) has no generator, flagged by a negative real part"""
        ring = QuadraticRing(-5)
        g = euclidean_gcd_best_effort(QuadraticInteger(2, 0, ring), QuadraticInteger(1, 1, ring))
        assert g == -2
        assert g.real < 0


class TestPrimeFactors:
    """Tests for prime_factors on quadratic integers"""

    def test_gaussian(self):
        """Known factorizations in Z[i]"""
        ring = QuadraticRing(-1)
        assert prime_factors(QuadraticInteger(5, 0, ring)) == [
            QuadraticInteger(2, 1, ring),
            QuadraticInteger(2, -1, ring),
        ]
        assert prime_factors(QuadraticInteger(2, 0, ring)) == [
            QuadraticInteger(0, -1, ring),
            QuadraticInteger(1, 1, ring),
            QuadraticInteger(1, 1, ring),
        ]
        assert prime_factors(QuadraticInteger(3, 0, ring)) == [3]
        assert prime_factors(QuadraticInteger(-3, 0, ring)) == [-1, 3]

    def test_units_and_zero(self):
        """Units and zero are their own factorization"""
        ring = QuadraticRing(-1)
        assert prime_factors(QuadraticInteger(0, 1, ring)) == [QuadraticInteger(0, 1, ring)]
        assert prime_factors(QuadraticInteger(0, 0, ring)) == [0]

    @pytest.mark.parametrize("d", [-1, -2, -3, -7, -11, -19])
    def test_product(self, d):
        """Factors are prime, sorted by norm, and multiply back"""
        ring = QuadraticRing(d)
        for z in _elements(ring, 6):
            if z.norm() < 2:
                continue

            factors = prime_factors(z)
            assert reduce(mul, factors) == z

            primes = [f for f in factors if f.norm() > 1]
            assert all(is_prime(f) for f in primes)
            assert [f.norm() for f in primes] == sorted(f.norm() for f in primes)
            assert all(f.real > 0 or (f.real == 0 and f.imag > 0) for f in primes)

    def test_rational_heegner(self):
        """Rational integers in a larger UFD"""
        ring = QuadraticRing(-43)
        for n in range(2, 40):
            assert reduce(mul, prime_factors(QuadraticInteger(n, 0, ring))) == n

    def test_non_ufd(self):
        """Z[sqrt(-5)] has no unique factorization"""
        with pytest.raises(NonUniqueFactorizationDomainError):
            prime_factors(QuadraticInteger(6, 0, QuadraticRing(-5)))


class TestFactorizeBestEffort:
    """Tests for factorize_best_effort"""

    def test_ambiguous(self):
        """6 = 2 * 3, flagged by two leading -1"""
        ring = QuadraticRing(-5)
        assert factorize_best_effort(QuadraticInteger(6, 0, ring)) == [-1, -1, 2, 3]
        assert factorize_best_effort(QuadraticInteger(1, 1, ring)) == [-1, -1, QuadraticInteger(1, 1, ring)]

    def test_unambiguous(self):
        """A prime of Z[sqrt(-5)] needs no flag"""
        ring = QuadraticRing(-5)
        assert factorize_best_effort(QuadraticInteger(3, 2, ring)) == [QuadraticInteger(3, 2, ring)]

    def test_ufd(self):
        """In a UFD the result is the prime factorization"""
        ring = QuadraticRing(-1)
        z = QuadraticInteger(10, 0, ring)
        assert factorize_best_effort(z) == prime_factors(z)

    @pytest.mark.parametrize("d", [-5, -6, -10, -14, -15])
    def test_product(self, d):
        """Factors are irreducible and multiply back"""
        ring = QuadraticRing(d)
        for z in _elements(ring, 5):
            if z.norm() < 2:
                continue

            factors = factorize_best_effort(z)
            assert reduce(mul, factors) == z
            assert all(is_irreducible(f) for f in factors if f.norm() > 1)

    def test_logging(self, caplog):
        """Ambiguous factors are logged at debug level"""
        caplog.set_level(logging.DEBUG, logger="quadint.ntheory")
        factorize_best_effort(QuadraticInteger(6, 0, QuadraticRing(-5)))

        assert "irreducible but not prime" in caplog.text
