"""
EcoPilot Root Module

Event-driven energy optimization pipeline: sensor readings are aggregated
per day, threshold breaches trigger an optimization lifecycle, and the
resulting remediation decision is executed asynchronously.

Layer Structure:
- Domain: Core business logic and entities
- Application: Use cases and DTOs
- Infrastructure: MongoDB, Celery, Redis and AI backend implementations
- Presentation: Controllers for the REST API
- Shared: Cross-cutting concerns and shared utilities
- Main: Composition root, application entry points and configuration
"""
