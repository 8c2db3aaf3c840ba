"""Domain models."""

from domain.models import ShadeSettings

__all__ = ['ShadeSettings']
