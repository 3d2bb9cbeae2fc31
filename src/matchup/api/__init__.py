"""HTTP surface for the matchup generator."""
