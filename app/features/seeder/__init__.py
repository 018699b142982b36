"""Seeder feature module exposing the seeding pipeline over REST.

Lets an operator dashboard inspect the store, run the pipeline and manage
snapshots.
"""

from app.features.seeder.routes import router

__all__ = ["router"]
