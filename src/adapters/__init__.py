"""Adapters to the outside world.

Why:
- Wrap httpx and the provider SDKs behind the core interfaces.
- Translate third-party exceptions into `core.errors` at the boundary.
"""
