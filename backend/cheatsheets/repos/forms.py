"""État des formulaires d'ajout et d'édition de dépôts."""

from dataclasses import dataclass
from typing import Optional

from ..database import Repository, TrackedRepository
from .service import DEFAULT_BRANCH, RepositoryService, validate_required

FieldValue = str | bool


class DraftStore:
    """Persistance des valeurs en cours de saisie, une clé par champ."""

    def __init__(self, repository: Repository):
        self.repository = repository

    def load(self, key: str, default: FieldValue) -> FieldValue:
        """Valeur sauvegardée si elle existe et diffère du défaut."""
        stored = self.repository.get_draft(key)
        if stored is not None and stored != default:
            return stored
        return default

    def save(self, key: str, value: FieldValue) -> None:
        self.repository.set_draft(key, value)

    def clear(self, key: str) -> None:
        self.repository.delete_draft(key)


@dataclass(frozen=True)
class FormField:
    """Champ de formulaire."""

    id: str
    default: FieldValue = ""
    draft_key: Optional[str] = None


class AddRepositoryForm:
    """Formulaire d'ajout ; chaque saisie est conservée comme brouillon."""

    FIELDS = (
        FormField("name", "", draft_key="add-repo-name"),
        FormField("owner", "", draft_key="add-repo-owner"),
        FormField("description", "", draft_key="add-repo-description"),
        FormField("url", "", draft_key="add-repo-url"),
        FormField("is_private", False, draft_key="add-repo-private"),
        FormField("default_branch", DEFAULT_BRANCH, draft_key="add-repo-branch"),
    )

    def __init__(self, drafts: DraftStore):
        self.drafts = drafts
        self.show_errors = False
        self.values: dict[str, FieldValue] = {
            field.id: drafts.load(field.draft_key, field.default) for field in self.FIELDS
        }

    def field(self, field_id: str) -> FormField:
        for field in self.FIELDS:
            if field.id == field_id:
                return field
        raise KeyError(field_id)

    def update(self, field_id: str, value: FieldValue) -> None:
        """Change la valeur d'un champ et sauvegarde le brouillon."""
        field = self.field(field_id)
        self.values[field_id] = value
        self.drafts.save(field.draft_key, value)

    def errors(self) -> dict[str, str]:
        """Erreurs affichées seulement après une tentative de soumission."""
        if not self.show_errors:
            return {}
        return validate_required(self.values["name"], self.values["owner"])

    def submit(self, service: RepositoryService) -> Optional[TrackedRepository]:
        """Ajoute le dépôt ; None si un champ obligatoire est vide."""
        self.show_errors = True
        if self.errors():
            return None

        repo = service.add_user_repository(
            name=self.values["name"],
            owner=self.values["owner"],
            description=self.values["description"],
            url=self.values["url"],
            is_private=bool(self.values["is_private"]),
            default_branch=self.values["default_branch"],
        )
        self.clear_drafts()
        return repo

    def clear_drafts(self) -> None:
        for field in self.FIELDS:
            self.drafts.clear(field.draft_key)
            self.values[field.id] = field.default

    def reset(self) -> None:
        """Vide le formulaire et ses brouillons."""
        self.clear_drafts()
        self.show_errors = False


class EditRepositoryForm:
    """Formulaire d'édition, pré-rempli depuis le dépôt existant."""

    FIELDS = (
        FormField("name"),
        FormField("owner"),
        FormField("description"),
        FormField("url"),
        FormField("default_branch", DEFAULT_BRANCH),
    )

    def __init__(self, repo: TrackedRepository):
        self.repo = repo
        self.show_errors = False
        self.values: dict[str, str] = {
            field.id: getattr(repo, field.id) or field.default for field in self.FIELDS
        }

    def update(self, field_id: str, value: str) -> None:
        if field_id not in self.values:
            raise KeyError(field_id)
        self.values[field_id] = value

    def errors(self) -> dict[str, str]:
        if not self.show_errors:
            return {}
        return validate_required(self.values["name"], self.values["owner"])

    def submit(self, service: RepositoryService) -> Optional[TrackedRepository]:
        self.show_errors = True
        if self.errors():
            return None

        return service.update_user_repository(
            self.repo.id,
            {
                "name": self.values["name"].strip(),
                "owner": self.values["owner"].strip(),
                "description": self.values["description"].strip() or None,
                "url": self.values["url"].strip() or None,
                "default_branch": self.values["default_branch"].strip(),
            },
        )


def filter_repositories(
    repos: list[TrackedRepository], search_text: str
) -> list[TrackedRepository]:
    """Filtre sur le nom, le propriétaire ou la description (insensible à la casse)."""
    needle = (search_text or "").lower()
    if not needle:
        return list(repos)
    return [
        repo
        for repo in repos
        if needle in repo.name.lower()
        or needle in repo.owner.lower()
        or needle in (repo.description or "").lower()
    ]
