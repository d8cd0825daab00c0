"""
Application Layer Package

Use cases orchestrating the domain, and the DTOs that form the contracts of
the REST API and of the queued events.
"""
