"""Core settings for repobatch."""

from .config import RepositorySettings

__all__ = ["RepositorySettings"]
