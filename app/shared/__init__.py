"""Shared infrastructure: the document store and the seeding pipeline."""
