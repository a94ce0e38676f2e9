"""
Infrastructure layer - external service integrations.

Each subdirectory wraps an external dependency:
- google: OAuth token endpoint
- storage: Cloud Storage uploads (plus an in-memory mock)

These wrappers translate between HTTP responses and our domain errors.
"""
