"""Service layer: application services orchestrating repositories and ports.

Import concrete services from their subpackages, e.g.
``from favapi.services.auth.service import AuthService``.
"""
