"""
Feature modules live under this package.

Each module owns its models, service functions, JSON API blueprint and HTML
views, while reusing the platform primitives (DB session, storage, errors).
"""
