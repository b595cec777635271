"""Gestionnaire des dépôts de cheatsheets suivis."""

from .service import RepositoryService, ValidationError, default_repository_url, validate_required
from .forms import AddRepositoryForm, DraftStore, EditRepositoryForm, FormField, filter_repositories
from .sync import GitHubSyncer, SyncResult

__all__ = [
    "RepositoryService",
    "ValidationError",
    "default_repository_url",
    "validate_required",
    "AddRepositoryForm",
    "DraftStore",
    "EditRepositoryForm",
    "FormField",
    "filter_repositories",
    "GitHubSyncer",
    "SyncResult",
]
