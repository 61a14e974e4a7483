"""Repository exports."""

from .talks_repo import TalksRepository

__all__ = ["TalksRepository"]
