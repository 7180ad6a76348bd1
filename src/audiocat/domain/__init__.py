"""Domain layer — records, unique keys, and text normalization.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
