"""Core domain logic: personalities, contract decisions, evolution."""
