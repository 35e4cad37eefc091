"""API routers for the confirmation-preparation service."""

from bierzmowanie.routers import accounts, auth, candidates, groups  # noqa: F401
