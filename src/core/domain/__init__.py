"""Domain models and registries.

Why:
- Pure data structures (Pydantic v2) and closed sets of identifiers.
- The domain knows nothing about HTTP, CLI or provider SDKs.
"""
