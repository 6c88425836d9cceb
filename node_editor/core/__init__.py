"""Core constants, exceptions, state and domain logic."""
