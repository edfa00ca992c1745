"""Core interfaces/abstractions.

Why:
- Contracts (Protocol) implemented by adapters and the CLI.
- The pipeline depends on these, so every stage can run against stubs.
"""
