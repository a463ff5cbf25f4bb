from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from quadint.quad import QuadraticFraction, QuadraticInteger


class QuadraticIntegerError(Exception):
    """Base class for every failure raised by quadint."""


class InvalidParameterError(QuadraticIntegerError, ValueError):
    """A ring or integer was constructed from values that do not describe one."""


class ArithmeticOverflowError(QuadraticIntegerError, OverflowError):
    """An intermediate or final value left the signed 32-bit range."""

    def __init__(self, message: str, value: int) -> None:
        super().__init__(message)
        self.value = value


class AlgebraicDegreeOverflowError(QuadraticIntegerError, ArithmeticError):
    """
    The exact result would be an algebraic integer of higher degree than supported.

    Raised when two numbers with nonzero imaginary parts from different rings are
    combined: their sum or product generally lives in a degree 4 extension.
    """

    def __init__(self,
                 message: str,
                 operands: tuple["QuadraticInteger", "QuadraticInteger"],
                 max_degree: int = 2,
                 necessary_degree: int = 4) -> None:
        super().__init__(message)
        self.operands = operands
        self.max_degree = max_degree
        self.necessary_degree = necessary_degree


class NotDivisibleError(QuadraticIntegerError, ArithmeticError):
    """
    Exact division would leave the ring.

    The reduced fraction that escaped the ring is kept in ``fraction`` so the caller can
    round back to a nearby ring element; the Euclidean algorithm relies on this.
    """

    def __init__(self,
                 message: str,
                 fraction: "QuadraticFraction",
                 dividend: Union["QuadraticInteger", int, None] = None,
                 divisor: Union["QuadraticInteger", int, None] = None) -> None:
        super().__init__(message)
        self.fraction = fraction
        self.dividend = dividend
        self.divisor = divisor

    def round_toward_zero(self) -> "QuadraticInteger":
        """See QuadraticFraction.round_toward_zero"""
        return self.fraction.round_toward_zero()

    def round_away_from_zero(self) -> "QuadraticInteger":
        """See QuadraticFraction.round_away_from_zero"""
        return self.fraction.round_away_from_zero()

    def bounding_integers(self) -> list["QuadraticInteger"]:
        """See QuadraticFraction.bounding_integers"""
        return self.fraction.bounding_integers()


class NonEuclideanDomainError(QuadraticIntegerError, ArithmeticError):
    """The Euclidean GCD was requested in a ring that is not known to be norm-Euclidean."""

    def __init__(self, message: str, a: "QuadraticInteger", b: "QuadraticInteger") -> None:
        super().__init__(message)
        # Larger norm first, the order the algorithm would have used. Unbounded norms,
        # so an operand with a huge norm still gets this error rather than an overflow.
        if a.exact_norm() < b.exact_norm():
            a, b = b, a
        self.operands = (a, b)

    def try_euclidean_gcd_anyway(self) -> "QuadraticInteger":
        """
        Best-effort greatest common divisor of the operands.

        Runs the Euclidean descent as far as it goes, and when it gets stuck looks for a
        single element generating the same ideal as the operands.

        Returns:
            QuadraticInteger: The gcd when one exists. Otherwise the number where the
                descent got stuck, with a negative real part to say so.
        """
        from quadint.ntheory import euclidean_gcd_best_effort

        return euclidean_gcd_best_effort(*self.operands)


class NonUniqueFactorizationDomainError(QuadraticIntegerError, ArithmeticError):
    """Prime factorization was requested in a ring without unique factorization."""

    def __init__(self, message: str, number: "QuadraticInteger") -> None:
        super().__init__(message)
        self.number = number

    def try_to_factorize_anyway(self) -> list["QuadraticInteger"]:
        """
        Best-effort factorization of the number into irreducibles.

        The list multiplies back to the number. If any factor is irreducible but not
        prime, the factorization is not the only one, and the list starts with the unit
        -1 twice to say so.

        Returns:
            list: The factors, unit first when there is one.
        """
        from quadint.ntheory import factorize_best_effort

        return factorize_best_effort(self.number)
