"""Faction scoring and team matchup generation for Rome II multiplayer battles."""
