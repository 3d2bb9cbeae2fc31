"""Utility functions for the matchup generator."""

from matchup.utils.rng import create_rng, generate_seed, random_choice, shuffled

__all__ = [
    "create_rng",
    "generate_seed",
    "random_choice",
    "shuffled",
]
