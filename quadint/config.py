from dataclasses import dataclass

from quadint.ring import QuadraticRing


@dataclass(frozen=True)
class RenderConfig:
    """
    Presentation preferences, handed to whatever renders rings and numbers.

    The arithmetic never looks at this; it exists so the letterform choice is an explicit
    value passed around instead of a process-wide switch.
    """
    blackboard_bold: bool = True

    @property
    def integers(self) -> str:
        return "ℤ" if self.blackboard_bold else "Z"

    @property
    def rationals(self) -> str:
        return "ℚ" if self.blackboard_bold else "Q"


DEFAULT_RENDER_CONFIG = RenderConfig()


def ring_name(ring: QuadraticRing, config: RenderConfig = DEFAULT_RENDER_CONFIG) -> str:
    """
    The customary name of the ring, e.g. Z[i], Z[ω], Z[√-5] or O_Q(√-7).

    Args:
        ring: The ring to name.
        config: Chooses blackboard-bold or plain capitals.

    Returns:
        str: The name.
    """
    if ring.d == -1:
        return f"{config.integers}[i]"
    if ring.d == -3:
        return f"{config.integers}[ω]"
    if ring.has_half_integers:
        return f"O_{config.rationals}(√{ring.d})"
    return f"{config.integers}[√{ring.d}]"
