"""Service modules wiring core domain logic to collaborators."""
