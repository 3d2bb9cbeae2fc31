"""Deterministic Random Number Generator (RNG) helpers for matchup generation.

Every random decision the allocator makes (map pick, shuffle, first faction of
a team) goes through a ``random.Random`` instance handed in by the caller.
This module builds those instances:

- Reproducibility: the same seed string always yields the same matchup
- Bug reproduction: a reported seed replays the exact generation
- Production use: ``create_rng(None)`` returns an OS-backed source

Examples:
    >>> seed = generate_seed("session-1", 3, "balanced")
    >>> seed
    'session-1:3:balanced'
    >>> rng = create_rng(seed)
    >>> random_choice(rng, ["Rome", "Carthage", "Macedon"])["choice"] in {"Rome", "Carthage", "Macedon"}
    True
"""

import hashlib
import random
from collections.abc import Sequence
from typing import Any


def generate_seed(session_id: str, request_number: int, context: str) -> str:
    """Generate a deterministic seed from session state.

    Format: "session_id:request_number:context"

    Args:
        session_id: Identifier of the caller's session
        request_number: How many generations the session has requested so far
        context: What the randomness is for (e.g., 'balanced', 'map_pick')

    Returns:
        Seed string for ``create_rng``

    Examples:
        >>> generate_seed("abc", 0, "random")
        'abc:0:random'

    Raises:
        ValueError: If request_number is negative or session_id is empty
    """
    if not session_id:
        raise ValueError("session_id must not be empty")
    if request_number < 0:
        raise ValueError(f"request_number must be non-negative, got {request_number}")

    return f"{session_id}:{request_number}:{context}"


def _seed_to_int(seed: str) -> int:
    """Convert seed string to a stable 64-bit integer for random.Random().

    Args:
        seed: Seed string

    Returns:
        64-bit integer derived from SHA-256(seed)
    """
    digest = hashlib.sha256(seed.encode("utf-8")).digest()
    # Use first 8 bytes for a 64-bit integer
    return int.from_bytes(digest[:8], "big", signed=False)


def create_rng(seed: str | None = None) -> random.Random:
    """Return a random source for the allocator.

    A seed string produces a reproducible ``random.Random``; ``None`` produces
    a ``random.SystemRandom`` backed by the operating system.
    """
    if seed is None:
        return random.SystemRandom()
    return random.Random(_seed_to_int(seed))


def random_choice(rng: random.Random, options: Sequence[Any]) -> dict[str, Any]:
    """Choose uniformly from options using the supplied source.

    Args:
        rng: Random source (see ``create_rng``)
        options: Options to choose from (must be non-empty)

    Returns:
        Dictionary containing:
            - choice: The selected option
            - index: Index of the selected option

    Raises:
        ValueError: If options is empty
    """
    if not options:
        raise ValueError("options list cannot be empty")

    index = rng.randrange(len(options))
    return {"choice": options[index], "index": index}


def shuffled(rng: random.Random, items: Sequence[Any]) -> list[Any]:
    """Return a uniformly shuffled copy of ``items``."""
    result = list(items)
    rng.shuffle(result)
    return result
