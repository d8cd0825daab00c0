"""
Domain Layer Package

Entities, repository interfaces, ports and pure domain services of the
optimization pipeline. Nothing in here depends on a framework.
"""
