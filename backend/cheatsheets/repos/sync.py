"""
Client GitHub pour synchroniser les cheatsheets d'un dépôt suivi.

Liste le contenu du dépôt via l'API contents (branche par défaut,
sous-dossier optionnel) et télécharge les fichiers Markdown dans un
dossier local : <sync_dir>/<owner>/<name>/...
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional
import logging

import requests

from ..database import TrackedRepository

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"
DEFAULT_USER_AGENT = "CheatsheetsRemastered/1.0"


@dataclass
class SyncResult:
    """Fichiers écrits lors d'une synchronisation."""

    repository: str
    files: list[Path] = field(default_factory=list)


class GitHubSyncer:
    """Télécharge les fichiers .md d'un dépôt GitHub."""

    def __init__(
        self,
        target_dir: str | Path,
        session: Optional[requests.Session] = None,
        api_url: str = GITHUB_API_URL,
        timeout: int = 30,
        extensions: tuple[str, ...] = (".md",),
    ):
        self.target_dir = Path(target_dir)
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.extensions = extensions
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "User-Agent": DEFAULT_USER_AGENT,
                "Accept": "application/vnd.github+json",
            }
        )

    def _headers(self, token: Optional[str]) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"} if token else {}

    def list_contents(
        self, repo: TrackedRepository, path: str, token: Optional[str] = None
    ) -> list[dict[str, Any]]:
        """Liste un dossier du dépôt (un fichier seul est renvoyé en liste)."""
        url = f"{self.api_url}/repos/{repo.owner}/{repo.name}/contents/{path}".rstrip("/")
        response = self.session.get(
            url,
            params={"ref": repo.default_branch},
            headers=self._headers(token),
            timeout=self.timeout,
        )
        response.raise_for_status()
        data = response.json()
        return data if isinstance(data, list) else [data]

    def iter_files(self, repo: TrackedRepository, token: Optional[str] = None):
        """Parcourt récursivement les fichiers à synchroniser."""
        pending = [(repo.subdirectory or "").strip("/")]
        while pending:
            path = pending.pop(0)
            for item in self.list_contents(repo, path, token):
                if item.get("type") == "dir":
                    pending.append(item["path"])
                elif item.get("type") == "file" and item["name"].endswith(self.extensions):
                    yield item

    def sync(self, repo: TrackedRepository, token: Optional[str] = None) -> SyncResult:
        """Télécharge les fichiers du dépôt dans le dossier cible."""
        root = (repo.subdirectory or "").strip("/")
        destination = self.target_dir / repo.owner / repo.name
        result = SyncResult(repository=repo.full_name)

        logger.info(f"Syncing {repo.full_name}@{repo.default_branch} into {destination}")

        for item in self.iter_files(repo, token):
            relative = item["path"]
            if root and relative.startswith(root + "/"):
                relative = relative[len(root) + 1:]

            response = self.session.get(
                item["download_url"],
                headers=self._headers(token),
                timeout=self.timeout,
            )
            response.raise_for_status()

            target = destination / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(response.content)
            result.files.append(target)
            logger.debug(f"  wrote {target}")

        logger.info(f"Synced {len(result.files)} files from {repo.full_name}")
        return result
