"""Repository pour les opérations de base de données."""

from datetime import datetime
from pathlib import Path
from typing import Optional

from sqlalchemy import func

from ..config import ensure_parent
from .models import Draft, TrackedRepository, init_db


class RepositoryNotFoundError(LookupError):
    """Aucun dépôt suivi avec cet identifiant."""

    def __init__(self, repository_id: str):
        super().__init__(f"Repository not found: {repository_id}")
        self.repository_id = repository_id


# Champs modifiables via update_repository
EDITABLE_FIELDS = {
    "name",
    "owner",
    "description",
    "url",
    "is_private",
    "default_branch",
    "subdirectory",
}


class Repository:
    """Gestionnaire des opérations de base de données."""

    def __init__(self, db_path: str | Path):
        self.db_path = str(db_path)
        if self.db_path != ":memory:":
            ensure_parent(Path(self.db_path))
        self.session = init_db(self.db_path)

    def close(self):
        """Ferme la session."""
        self.session.close()

    # ===== Dépôts suivis =====

    def list_repositories(self) -> list[TrackedRepository]:
        """Tous les dépôts, triés par propriétaire puis nom."""
        return (
            self.session.query(TrackedRepository)
            .order_by(func.lower(TrackedRepository.owner), func.lower(TrackedRepository.name))
            .all()
        )

    def get_repository(self, repository_id: str) -> Optional[TrackedRepository]:
        """Récupère un dépôt par son identifiant."""
        return self.session.get(TrackedRepository, repository_id)

    def find_by_full_name(self, owner: str, name: str) -> Optional[TrackedRepository]:
        return (
            self.session.query(TrackedRepository)
            .filter(TrackedRepository.owner == owner, TrackedRepository.name == name)
            .first()
        )

    def add_repository(
        self,
        name: str,
        owner: str,
        url: str,
        description: Optional[str] = None,
        is_private: bool = False,
        default_branch: str = "main",
        subdirectory: Optional[str] = None,
    ) -> TrackedRepository:
        """Ajoute un dépôt (l'identifiant est généré)."""
        repo = TrackedRepository(
            name=name,
            owner=owner,
            url=url,
            description=description,
            is_private=is_private,
            default_branch=default_branch,
            subdirectory=subdirectory,
        )
        self.session.add(repo)
        self.session.commit()
        return repo

    def update_repository(self, repository_id: str, **changes) -> TrackedRepository:
        """Met à jour les champs d'un dépôt existant."""
        repo = self._require(repository_id)

        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown repository fields: {', '.join(sorted(unknown))}")

        for key, value in changes.items():
            setattr(repo, key, value)
        repo.updated_at = datetime.now()
        self.session.commit()
        return repo

    def remove_repository(self, repository_id: str) -> None:
        """Supprime un dépôt."""
        repo = self._require(repository_id)
        self.session.delete(repo)
        self.session.commit()

    def mark_synced(self, repository_id: str, when: Optional[datetime] = None) -> TrackedRepository:
        """Enregistre la date de dernière synchronisation."""
        repo = self._require(repository_id)
        repo.last_synced_at = when or datetime.now()
        self.session.commit()
        return repo

    def _require(self, repository_id: str) -> TrackedRepository:
        repo = self.get_repository(repository_id)
        if repo is None:
            raise RepositoryNotFoundError(repository_id)
        return repo

    # ===== Brouillons =====

    def get_draft(self, key: str) -> Optional[str | bool]:
        draft = self.session.get(Draft, key)
        return draft.get_value() if draft else None

    def set_draft(self, key: str, value: str | bool) -> None:
        draft = self.session.get(Draft, key)
        if draft is None:
            draft = Draft(key=key)
            self.session.add(draft)
        draft.set_value(value)
        self.session.commit()

    def delete_draft(self, key: str) -> bool:
        deleted = self.session.query(Draft).filter(Draft.key == key).delete()
        self.session.commit()
        return deleted > 0

    def list_drafts(self) -> dict[str, str | bool]:
        return {draft.key: draft.get_value() for draft in self.session.query(Draft).all()}
