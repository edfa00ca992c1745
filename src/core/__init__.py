"""Core of x-context: domain, interfaces, services and configuration.

The core knows nothing about HTTP clients, provider SDKs or terminal output.
"""
