from math import sqrt

from quadint.exceptions import InvalidParameterError
from quadint.utils import in_int_range, is_squarefree


class QuadraticRing:
    """
    The ring of algebraic integers of an imaginary quadratic field Q(sqrt(d)).

    d must be a negative squarefree integer. When d = 1 (mod 4) the ring contains
    "half-integers" (a + b*sqrt(d))/2 with a, b both odd; otherwise it is simply
    Z[sqrt(d)].

    Rings are immutable; two rings are equal iff they have the same d.
    """

    __slots__ = ("d", "abs_d", "sqrt_abs_d", "has_half_integers")

    d: int
    abs_d: int
    sqrt_abs_d: float
    has_half_integers: bool

    def __init__(self, d: int) -> None:
        """
        Initialize a QuadraticRing.

        Args:
            d: The radicand, negative and squarefree.

        Raises:
            InvalidParameterError: If d is not negative, not squarefree or out of range.
        """
        d = int(d)
        if d > -1:
            raise InvalidParameterError(f"Negative integer required for parameter d, got {d}")
        if not in_int_range(d):
            raise InvalidParameterError(f"Parameter d = {d} is outside the signed 32-bit range")
        if not is_squarefree(d):
            raise InvalidParameterError(f"Squarefree integer required for parameter d, got {d}")

        object.__setattr__(self, "d", d)
        object.__setattr__(self, "abs_d", -d)
        # Display only, never used for exact decisions
        object.__setattr__(self, "sqrt_abs_d", sqrt(-d))
        object.__setattr__(self, "has_half_integers", d % 4 == 1)

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("QuadraticRing is immutable")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QuadraticRing):
            return False

        return self.d == other.d

    def __hash__(self) -> int:
        return hash(("QuadraticRing", self.d))

    def __repr__(self) -> str:
        return f"QuadraticRing({self.d})"

    def __str__(self) -> str:
        if self.d == -1:
            return "Z[i]"
        if self.d == -3:
            return "Z[ω]"
        if self.has_half_integers:
            return f"O_(Q(√{self.d}))"
        return f"Z[√{self.d}]"
