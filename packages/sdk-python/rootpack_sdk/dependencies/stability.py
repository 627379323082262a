"""
Stability Resolution
====================

Resolves the minimum-stability and prefer-stable flags gathered from every
contributing manifest into the single values of the root manifest.
"""

from typing import Iterable, Optional

from rootpack_common import (
    DEFAULT_MINIMUM_STABILITY,
    DEFAULT_PREFER_STABLE,
    STABILITY_RANKS,
    ValidationError,
)


def stability_rank(stability: str) -> int:
    """Rank of a stability flag, dev (0) through stable (4)."""
    try:
        return STABILITY_RANKS[stability]
    except KeyError:
        raise ValidationError(f"Unsupported minimum-stability: '{stability}'")


def resolve_minimum_stability(declared: Iterable[Optional[str]]) -> str:
    """
    Pick the lowest declared stability.

    The lowest flag satisfies the widest range of required packages:
    ['stable', 'rc', 'beta'] resolves to 'beta'. Undeclared values (None)
    are ignored; with nothing declared the result is 'stable'.
    """
    minimum = DEFAULT_MINIMUM_STABILITY
    for stability in declared:
        if stability is None:
            continue
        if stability_rank(stability) < stability_rank(minimum):
            minimum = stability
    return minimum


def resolve_prefer_stable(declared: Iterable[Optional[bool]]) -> bool:
    """
    Resolve prefer-stable to False only if someone explicitly declared False.

    True is preferable since it avoids re-downloading core packages when
    minimum-stability gets lowered.
    """
    for prefer_stable in declared:
        if prefer_stable is False:
            return False
    return DEFAULT_PREFER_STABLE
