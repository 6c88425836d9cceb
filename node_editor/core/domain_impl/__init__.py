"""Domain implementation pillars."""
