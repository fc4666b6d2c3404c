"""Schema-driven collection administration engine."""
