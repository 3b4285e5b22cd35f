"""Routers package."""

from . import generation, github, health, payments, projects

__all__ = ["generation", "github", "health", "payments", "projects"]
