"""Seona Connector — let the Seona automation platform manage site content.

A small FastAPI service that authenticates the Seona platform with an
RSA-SHA512 signature over the site identifier, and exposes an
ownership-scoped API for creating, reading, updating and deleting
posts the platform created.
"""

__version__ = "1.0.3"
