"""Service d'accès aux dépôts suivis (CRUD + synchronisation)."""

from typing import Optional
import logging

from ..database import Repository, RepositoryNotFoundError, TrackedRepository
from .sync import GitHubSyncer, SyncResult

logger = logging.getLogger(__name__)

DEFAULT_BRANCH = "main"


class ValidationError(ValueError):
    """Valeurs de formulaire invalides (champ obligatoire vide)."""

    def __init__(self, errors: dict[str, str]):
        super().__init__("; ".join(errors.values()))
        self.errors = errors


def default_repository_url(owner: str, name: str) -> str:
    return f"https://github.com/{owner}/{name}"


def _clean(value: Optional[str]) -> Optional[str]:
    """Trim ; chaîne vide -> None."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def validate_required(name: Optional[str], owner: Optional[str]) -> dict[str, str]:
    """Erreurs des champs obligatoires, par identifiant de champ."""
    errors = {}
    if not (name or "").strip():
        errors["name"] = "Repository name is required"
    if not (owner or "").strip():
        errors["owner"] = "Owner is required"
    return errors


class RepositoryService:
    """Point d'entrée unique du gestionnaire de dépôts vers le stockage."""

    def __init__(self, repository: Repository, syncer: Optional[GitHubSyncer] = None):
        self.repository = repository
        self.syncer = syncer

    def get_user_repositories(self) -> list[TrackedRepository]:
        return self.repository.list_repositories()

    def get_user_repository(self, repository_id: str) -> TrackedRepository:
        repo = self.repository.get_repository(repository_id)
        if repo is None:
            raise RepositoryNotFoundError(repository_id)
        return repo

    def add_user_repository(
        self,
        name: str,
        owner: str,
        description: Optional[str] = None,
        url: Optional[str] = None,
        is_private: bool = False,
        default_branch: Optional[str] = DEFAULT_BRANCH,
        subdirectory: Optional[str] = None,
    ) -> TrackedRepository:
        """Ajoute un dépôt ; l'URL est générée si elle est vide."""
        errors = validate_required(name, owner)
        if errors:
            raise ValidationError(errors)

        name = name.strip()
        owner = owner.strip()
        repo = self.repository.add_repository(
            name=name,
            owner=owner,
            url=_clean(url) or default_repository_url(owner, name),
            description=_clean(description),
            is_private=bool(is_private),
            default_branch=_clean(default_branch) or DEFAULT_BRANCH,
            subdirectory=_clean(subdirectory),
        )
        logger.info(f"Added repository {repo.full_name} ({repo.id})")
        return repo

    def update_user_repository(self, repository_id: str, changes: dict) -> TrackedRepository:
        """Applique les modifications d'un formulaire d'édition."""
        current = self.get_user_repository(repository_id)

        name = changes.get("name", current.name)
        owner = changes.get("owner", current.owner)
        errors = validate_required(name, owner)
        if errors:
            raise ValidationError(errors)

        updates = {"name": name.strip(), "owner": owner.strip()}
        if "description" in changes:
            updates["description"] = _clean(changes["description"])
        if "url" in changes:
            updates["url"] = _clean(changes["url"]) or default_repository_url(
                updates["owner"], updates["name"]
            )
        if "default_branch" in changes:
            updates["default_branch"] = _clean(changes["default_branch"]) or DEFAULT_BRANCH
        if "subdirectory" in changes:
            updates["subdirectory"] = _clean(changes["subdirectory"])
        if "is_private" in changes:
            updates["is_private"] = bool(changes["is_private"])

        repo = self.repository.update_repository(repository_id, **updates)
        logger.info(f"Updated repository {repo.full_name} ({repo.id})")
        return repo

    def remove_user_repository(self, repository_id: str) -> None:
        self.repository.remove_repository(repository_id)
        logger.info(f"Removed repository {repository_id}")

    def sync_repository_files(
        self, repo: TrackedRepository, token: Optional[str] = None
    ) -> SyncResult:
        """Synchronise les fichiers du dépôt puis note la date de synchro."""
        if self.syncer is None:
            raise RuntimeError("No syncer configured")
        result = self.syncer.sync(repo, token)
        self.repository.mark_synced(repo.id)
        return result
