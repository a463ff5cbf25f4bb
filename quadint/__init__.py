from quadint.config import RenderConfig, ring_name
from quadint.exceptions import (
    AlgebraicDegreeOverflowError,
    ArithmeticOverflowError,
    InvalidParameterError,
    NonEuclideanDomainError,
    NonUniqueFactorizationDomainError,
    NotDivisibleError,
    QuadraticIntegerError,
)
from quadint.ntheory import (
    COMPLEX_CUBIC_ROOT_OF_UNITY,
    HEEGNER_NUMBERS,
    IMAGINARY_UNIT,
    NORM_EUCLIDEAN_DISCRIMINANTS,
    RING_EISENSTEIN,
    RING_GAUSSIAN,
    euclidean_gcd,
    euclidean_gcd_best_effort,
    factorize_best_effort,
    field_discriminant,
    is_irreducible,
    is_prime,
    moebius_mu,
    prime_factors,
    random_negative_squarefree,
    symbol_jacobi,
    symbol_kronecker,
    symbol_legendre,
)
from quadint.quad import QuadraticFraction, QuadraticInteger
from quadint.ring import QuadraticRing
from quadint.utils import is_squarefree

__all__ = [
    "AlgebraicDegreeOverflowError",
    "ArithmeticOverflowError",
    "COMPLEX_CUBIC_ROOT_OF_UNITY",
    "HEEGNER_NUMBERS",
    "IMAGINARY_UNIT",
    "InvalidParameterError",
    "NORM_EUCLIDEAN_DISCRIMINANTS",
    "NonEuclideanDomainError",
    "NonUniqueFactorizationDomainError",
    "NotDivisibleError",
    "QuadraticFraction",
    "QuadraticInteger",
    "QuadraticIntegerError",
    "QuadraticRing",
    "RING_EISENSTEIN",
    "RING_GAUSSIAN",
    "RenderConfig",
    "euclidean_gcd",
    "euclidean_gcd_best_effort",
    "factorize_best_effort",
    "field_discriminant",
    "is_irreducible",
    "is_prime",
    "is_squarefree",
    "moebius_mu",
    "prime_factors",
    "random_negative_squarefree",
    "ring_name",
    "symbol_jacobi",
    "symbol_kronecker",
    "symbol_legendre",
]
