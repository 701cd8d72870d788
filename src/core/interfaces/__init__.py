"""Core interfaces.

Contracts (Protocol) implemented by concrete adapters, so the services
depend on abstractions rather than on httpx.
"""
