from dataclasses import dataclass
from math import gcd
from typing import Iterator, Union

from quadint.exceptions import AlgebraicDegreeOverflowError, InvalidParameterError, NotDivisibleError
from quadint.ring import QuadraticRing
from quadint.utils import check_int_range, in_int_range

OTHER_OP_TYPES = int  # mypyc-friendly for isinstance
OP_TYPES = Union["QuadraticInteger", OTHER_OP_TYPES]


def _div_toward_zero(a: int, b: int) -> int:
    """a/b truncated toward zero. b must be > 0."""
    q = abs(a) // b
    return -q if a < 0 else q


def _div_away_from_zero(a: int, b: int) -> int:
    """a/b rounded away from zero. b must be > 0."""
    q = -(-abs(a) // b)
    return -q if a < 0 else q


# @dataclass(frozen=True, slots=True) once Py3.9 support has been dropped
@dataclass(frozen=True)
class QuadraticFraction:
    """
    An element of the field Q(sqrt(d)) that failed to be an algebraic integer:

        (real_numerator + imag_numerator * sqrt(d)) / denominator

    The fraction is reduced (gcd of the three numbers is 1) and denominator > 0.
    Produced by exact division; consumed by the rounding methods below, which map it
    back to nearby elements of the ring.
    """
    real_numerator: int
    imag_numerator: int
    denominator: int
    ring: QuadraticRing

    @property
    def numeric_real(self) -> float:
        return self.real_numerator / self.denominator

    @property
    def numeric_imag_mult(self) -> float:
        """The rational coefficient of sqrt(d)"""
        return self.imag_numerator / self.denominator

    @property
    def numeric_imag(self) -> float:
        """The imaginary part itself, coefficient times sqrt(|d|)"""
        return self.numeric_imag_mult * self.ring.sqrt_abs_d

    def _make(self, real: int, imag: int, denominator: int = 1) -> "QuadraticInteger":
        check_int_range(real, "Rounded real part")
        check_int_range(imag, "Rounded imaginary part")
        return QuadraticInteger(real, imag, self.ring, denominator)

    def round_toward_zero(self) -> "QuadraticInteger":
        """
        Truncate both coordinates toward zero.

        Raises:
            ArithmeticOverflowError: If the rounded value is out of range.

        Returns:
            QuadraticInteger: The truncated value (always has denominator 1).
        """
        return self._make(_div_toward_zero(self.real_numerator, self.denominator),
                          _div_toward_zero(self.imag_numerator, self.denominator))

    def round_away_from_zero(self) -> "QuadraticInteger":
        """
        Round both coordinates away from zero.

        Raises:
            ArithmeticOverflowError: If the rounded value is out of range.

        Returns:
            QuadraticInteger: The rounded value (always has denominator 1).
        """
        return self._make(_div_away_from_zero(self.real_numerator, self.denominator),
                          _div_away_from_zero(self.imag_numerator, self.denominator))

    def bounding_integers(self) -> list["QuadraticInteger"]:
        """
        The four corners of the lattice cell that contains this fraction, nearest first.

        Without half-integers the cell is the rectangle spanned by 1 and sqrt(d). With
        half-integers the lattice is spanned by (1 + sqrt(d))/2 and (1 - sqrt(d))/2, so
        the cell is a rhombus; in coordinates s = x + y, t = x - y (x the real part, y
        the coefficient of sqrt(d)) the lattice points are exactly the integer pairs.

        Raises:
            ArithmeticOverflowError: If a corner is out of range.

        Returns:
            list: Four ring elements, sorted by distance to the fraction.
        """
        num_re, num_im, den = self.real_numerator, self.imag_numerator, self.denominator

        # Corners as doubled coordinates (A, B) meaning (A + B*sqrt(d))/2
        corners: list[tuple[int, int]] = []
        if self.ring.has_half_integers:
            s0 = (num_re + num_im) // den
            t0 = (num_re - num_im) // den
            for s in (s0, s0 + 1):
                for t in (t0, t0 + 1):
                    corners.append((s + t, s - t))
        else:
            x0 = num_re // den
            y0 = num_im // den
            for x in (x0, x0 + 1):
                for y in (y0, y0 + 1):
                    corners.append((2 * x, 2 * y))

        # Scaled squared distance, same argmin as the true one:
        #   (A*den - 2*num_re)^2 + |d| * (B*den - 2*num_im)^2
        def metric(corner: tuple[int, int]) -> int:
            d_re = corner[0] * den - 2 * num_re
            d_im = corner[1] * den - 2 * num_im
            return d_re * d_re + self.ring.abs_d * d_im * d_im

        corners.sort(key=metric)
        return [self._make(a, b, 2) for a, b in corners]


class QuadraticInteger:
    """
    Algebraic integer of an imaginary quadratic ring, stored as

        (real + imag * sqrt(d)) / denominator

    with denominator 1 or 2. Denominator 2 only occurs in rings with half-integers,
    and then real and imag are both odd.

    Construction canonicalizes: a negative denominator flips the sign of both parts,
    and denominator 2 with two even parts is halved down to denominator 1. Equality
    and hashing rely on this canonical form.

    All arithmetic is exact and bounded to the signed 32-bit range; results that do not
    fit raise ArithmeticOverflowError rather than wrapping.
    """

    __slots__ = ("real", "imag", "ring", "denominator")

    real: int
    imag: int
    ring: QuadraticRing
    denominator: int

    def __init__(self, real: int, imag: int, ring: QuadraticRing, denominator: int = 1) -> None:
        """
        Initialize a QuadraticInteger.

        Args:
            real: Numerator of the rational part.
            imag: Numerator of the coefficient of sqrt(d).
            ring: The ring this number belongs to.
            denominator: 1 or 2 (negative values flip the sign of the numerators).

        Raises:
            InvalidParameterError: If the denominator or the parity of the parts is not
                allowed in the ring, or a part is out of the signed 32-bit range.
        """
        a, b, den = int(real), int(imag), int(denominator)

        if den < 0:
            a, b, den = -a, -b, -den

        if den not in (1, 2):
            raise InvalidParameterError(f"Parameter denominator must be 1 or 2, got {denominator}")

        if den == 2:
            if (a ^ b) & 1:
                raise InvalidParameterError("Parity of the real part must match parity of the imaginary part")

            if (a & 1) == 0:
                a, b, den = a // 2, b // 2, 1
            elif not ring.has_half_integers:
                raise InvalidParameterError(f"{ring} has no half-integers; both parts must be even for denominator 2")

        if not in_int_range(a) or not in_int_range(b):
            raise InvalidParameterError(f"Parts {a}, {b} are outside the signed 32-bit range")

        object.__setattr__(self, "real", a)
        object.__setattr__(self, "imag", b)
        object.__setattr__(self, "ring", ring)
        object.__setattr__(self, "denominator", den)

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("QuadraticInteger is immutable")

    # region helpers
    def _from_obj(self, n: OP_TYPES) -> "QuadraticInteger":
        """Lift a plain integer into this number's ring"""
        if isinstance(n, QuadraticInteger):
            return n

        if isinstance(n, OTHER_OP_TYPES):
            return QuadraticInteger(n, 0, self.ring)

        raise TypeError(f"Unable to combine QuadraticInteger and type {type(n)}")

    def _common_ring(self, other: "QuadraticInteger") -> QuadraticRing:
        """
        The ring an exact binary result lives in.

        Raises:
            AlgebraicDegreeOverflowError: If both operands have nonzero imaginary parts
                from different rings.
        """
        if self.imag and other.imag and self.ring != other.ring:
            raise AlgebraicDegreeOverflowError(
                f"Combining {self} in {self.ring} with {other} in {other.ring} "
                "would result in an algebraic integer of degree 4",
                (self, other))

        return self.ring if self.imag or not other.imag else other.ring
    # endregion

    # region arithmetic
    def _combine(self, other: OP_TYPES, sign: int, what: str) -> "QuadraticInteger":
        other = self._from_obj(other)
        ring = self._common_ring(other)

        den = max(self.denominator, other.denominator)
        real = self.real * (den // self.denominator) + sign * other.real * (den // other.denominator)
        imag = self.imag * (den // self.denominator) + sign * other.imag * (den // other.denominator)

        check_int_range(real, f"Real part of {what}")
        check_int_range(imag, f"Imaginary part of {what}")
        return QuadraticInteger(real, imag, ring, den)

    def plus(self, summand: OP_TYPES) -> "QuadraticInteger":
        """
        Exact sum.

        Raises:
            AlgebraicDegreeOverflowError: Both have imaginary parts from different rings.
            ArithmeticOverflowError: A part of the sum is out of range.
        """
        return self._combine(summand, 1, "sum")

    def minus(self, subtrahend: OP_TYPES) -> "QuadraticInteger":
        """
        Exact difference.

        Raises:
            AlgebraicDegreeOverflowError: Both have imaginary parts from different rings.
            ArithmeticOverflowError: A part of the difference is out of range.
        """
        return self._combine(subtrahend, -1, "difference")

    def times(self, multiplicand: OP_TYPES) -> "QuadraticInteger":
        """
        Exact product.

        (a + b*sqrt(d))(c + e*sqrt(d)) = (ac + be*d) + (ae + bc)*sqrt(d), and d < 0.

        Raises:
            AlgebraicDegreeOverflowError: Both have imaginary parts from different rings.
            ArithmeticOverflowError: A part of the product is out of range.
        """
        other = self._from_obj(multiplicand)
        ring = self._common_ring(other)

        real = self.real * other.real - self.imag * other.imag * ring.abs_d
        imag = self.real * other.imag + self.imag * other.real
        den = self.denominator * other.denominator

        # Two half-integers: both parts of the numerator are even here
        if den == 4:
            real //= 2
            imag //= 2
            den = 2

        check_int_range(real, "Real part of product")
        check_int_range(imag, "Imaginary part of product")
        return QuadraticInteger(real, imag, ring, den)

    def divides(self, divisor: OP_TYPES) -> "QuadraticInteger":
        """
        Exact quotient self / divisor.

        Multiplies by the conjugate of the divisor, divides by its norm, and reduces the
        fraction. The quotient must again be an algebraic integer of the ring.

        Raises:
            ZeroDivisionError: If divisor is 0.
            AlgebraicDegreeOverflowError: Both have imaginary parts from different rings.
            NotDivisibleError: If the quotient is not in the ring. The error carries the
                reduced fraction for rounding.
            ArithmeticOverflowError: A part of the quotient is out of range.

        Returns:
            QuadraticInteger: The quotient.
        """
        if isinstance(divisor, QuadraticInteger):
            ring = self._common_ring(divisor)
            if not divisor:
                raise ZeroDivisionError("Division by 0 is not allowed")

            real = self.real * divisor.real + self.imag * divisor.imag * ring.abs_d
            imag = self.imag * divisor.real - self.real * divisor.imag
            # norm(divisor) * den(self) * den(divisor), written to stay integral
            den = (divisor.real * divisor.real + ring.abs_d * divisor.imag * divisor.imag) \
                * self.denominator // divisor.denominator
        elif isinstance(divisor, OTHER_OP_TYPES):
            if divisor == 0:
                raise ZeroDivisionError("Division by 0 is not allowed")

            ring = self.ring
            real, imag, den = self.real, self.imag, self.denominator * int(divisor)
            if den < 0:
                real, imag, den = -real, -imag, -den
        else:
            raise TypeError(f"Unable to divide QuadraticInteger by type {type(divisor)}")

        g = gcd(real, imag, den)
        real, imag, den = real // g, imag // g, den // g

        if den == 1:
            divisible = True
        elif den == 2:
            # Not both even after reduction, so matching parity means both odd
            divisible = ring.has_half_integers and (real & 1) == (imag & 1)
        else:
            divisible = False

        if not divisible:
            raise NotDivisibleError(f"{self} is not divisible by {divisor}",
                                    QuadraticFraction(real, imag, den, ring),
                                    self,
                                    divisor)

        check_int_range(real, "Real part of quotient")
        check_int_range(imag, "Imaginary part of quotient")
        return QuadraticInteger(real, imag, ring, den)

    def __add__(self, other: OP_TYPES) -> "QuadraticInteger":
        if isinstance(other, (QuadraticInteger, OTHER_OP_TYPES)):
            return self.plus(other)

        return NotImplemented

    def __radd__(self, other: OTHER_OP_TYPES) -> "QuadraticInteger":
        return self.__add__(other)

    def __sub__(self, other: OP_TYPES) -> "QuadraticInteger":
        if isinstance(other, (QuadraticInteger, OTHER_OP_TYPES)):
            return self.minus(other)

        return NotImplemented

    def __rsub__(self, other: OTHER_OP_TYPES) -> "QuadraticInteger":
        if isinstance(other, OTHER_OP_TYPES):
            return self.__neg__().plus(other)

        return NotImplemented

    def __mul__(self, other: OP_TYPES) -> "QuadraticInteger":
        if isinstance(other, (QuadraticInteger, OTHER_OP_TYPES)):
            return self.times(other)

        return NotImplemented

    def __rmul__(self, other: OTHER_OP_TYPES) -> "QuadraticInteger":
        return self.__mul__(other)

    def __truediv__(self, other: OP_TYPES) -> "QuadraticInteger":
        if isinstance(other, (QuadraticInteger, OTHER_OP_TYPES)):
            return self.divides(other)

        return NotImplemented

    def __rtruediv__(self, other: OTHER_OP_TYPES) -> "QuadraticInteger":
        if isinstance(other, OTHER_OP_TYPES):
            return self._from_obj(other).divides(self)

        return NotImplemented

    def __neg__(self) -> "QuadraticInteger":
        return QuadraticInteger(check_int_range(-self.real, "Real part of negation"),
                                check_int_range(-self.imag, "Imaginary part of negation"),
                                self.ring,
                                self.denominator)

    def __pos__(self) -> "QuadraticInteger":
        return self

    def __pow__(self, exp: int) -> "QuadraticInteger":
        e = int(exp)
        if e < 0:
            raise ValueError("Negative powers not supported")

        result = QuadraticInteger(1, 0, self.ring)
        base = self
        while e:
            if e & 1:
                result = result * base

            e >>= 1
            if e:
                base = base * base

        return result
    # endregion

    # region invariants
    def conjugate(self) -> "QuadraticInteger":
        """a + b*sqrt(d) -> a - b*sqrt(d); purely real numbers are returned as is."""
        if not self.imag:
            return self

        return QuadraticInteger(self.real, -self.imag, self.ring, self.denominator)

    def algebraic_degree(self) -> int:
        """0 for zero, 1 for a nonzero rational integer, 2 otherwise."""
        if self.imag:
            return 2
        return 1 if self.real else 0

    def trace(self) -> int:
        """
        The sum of the number and its conjugate.

        Raises:
            ArithmeticOverflowError: If the trace is out of range.
        """
        return check_int_range(2 * self.real // self.denominator, "Trace")

    def norm(self) -> int:
        """
        The product of the number and its conjugate:

            N((a + b*sqrt(d))/den) = (a^2 + |d|*b^2) / den^2

        The primality and GCD algorithms depend on this being exact, so an out of range
        norm is an error, never a truncated value.

        Raises:
            ArithmeticOverflowError: If the norm is out of range.

        Returns:
            int: The norm.
        """
        return check_int_range(self.exact_norm(), "Norm")

    def exact_norm(self) -> int:
        """The norm as an unbounded int, for ordering and bookkeeping only."""
        num = self.real * self.real + self.ring.abs_d * self.imag * self.imag
        return num // (self.denominator * self.denominator)

    def min_polynomial(self) -> tuple[int, int, int]:
        """
        Coefficients of the minimal polynomial, constant term first.

        Returns:
            tuple: (0, 1, 0) for x, (-a, 1, 0) for x - a, (norm, -trace, 1) for x^2 - tx + n.
        """
        degree = self.algebraic_degree()
        if degree == 0:
            return 0, 1, 0
        if degree == 1:
            return -self.real, 1, 0
        return self.norm(), -self.trace(), 1

    def __abs__(self) -> int:
        return self.norm()
    # endregion

    # region accessors
    @property
    def twice_real(self) -> int:
        """Numerator of the real part over the denominator 2"""
        return self.real * (2 // self.denominator)

    @property
    def twice_imag(self) -> int:
        """Numerator of the coefficient of sqrt(d) over the denominator 2"""
        return self.imag * (2 // self.denominator)

    @property
    def numeric_real(self) -> float:
        return self.real / self.denominator

    @property
    def numeric_imag(self) -> float:
        return self.imag * self.ring.sqrt_abs_d / self.denominator

    def equals_int(self, n: int) -> bool:
        """True iff this number is the rational integer n."""
        return not self.imag and self.real == n

    def __bool__(self) -> bool:
        return bool(self.real or self.imag)

    def __iter__(self) -> Iterator[int]:
        return iter((self.real, self.imag, self.denominator))
    # endregion

    def __eq__(self, other: object) -> bool:
        if isinstance(other, OTHER_OP_TYPES):
            return self.equals_int(other)

        if not isinstance(other, QuadraticInteger):
            return False

        if (self.real, self.imag, self.denominator) != (other.real, other.imag, other.denominator):
            return False

        # Rational integers coincide across rings
        return not self.imag or self.ring == other.ring

    def __hash__(self) -> int:
        if not self.imag:
            # Same as the hash of the plain int, to agree with __eq__
            return hash(self.real)

        return hash((self.real, self.imag, self.ring.d, self.denominator))

    def __repr__(self) -> str:
        return f"QuadraticInteger({self.real}, {self.imag}, {self.ring!r}, {self.denominator})"

    def __str__(self) -> str:
        root = "i" if self.ring.d == -1 else f"√({self.ring.d})"

        def _imag_term(coeff: int, leading: bool) -> str:
            mag = -coeff if coeff < 0 else coeff
            mag_str = "" if mag == 1 else str(mag)
            if leading:
                return f"{'-' if coeff < 0 else ''}{mag_str}{root}"
            return f" {'-' if coeff < 0 else '+'} {mag_str}{root}"

        if self.denominator == 2:
            return f"({self.real}{_imag_term(self.imag, False)})/2"

        if not self.imag:
            return str(self.real)

        if not self.real:
            return _imag_term(self.imag, True)

        return f"{self.real}{_imag_term(self.imag, False)}"
