"""Domain layer — identities, amounts, billing rules, and access capabilities.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
