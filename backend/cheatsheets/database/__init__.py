"""Module de base de données SQLite."""

from .models import Base, Draft, TrackedRepository, init_db
from .repository import Repository, RepositoryNotFoundError

__all__ = [
    "Base",
    "Draft",
    "TrackedRepository",
    "init_db",
    "Repository",
    "RepositoryNotFoundError",
]
