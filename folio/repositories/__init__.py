"""Async repositories over the ORM tables."""
