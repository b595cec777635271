"""Fixtures partagées : dossiers temporaires, base SQLite, service."""

from pathlib import Path
import textwrap

import pytest

from cheatsheets.config import AppPaths
from cheatsheets.database import Repository
from cheatsheets.repos import RepositoryService


def write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(content).lstrip("\n"), encoding="utf-8")
    return path


@pytest.fixture
def paths(tmp_path) -> AppPaths:
    assets = tmp_path / "assets"
    (assets / "cheatsheets").mkdir(parents=True)
    return AppPaths(
        assets_dir=assets,
        db_path=tmp_path / "data" / "repos.db",
        sync_dir=tmp_path / "synced",
    )


@pytest.fixture
def repository(paths):
    repo = Repository(paths.db_path)
    yield repo
    repo.close()


class FakeSyncer:
    """Remplace GitHubSyncer : enregistre les appels."""

    def __init__(self, files=None, error=None):
        self.calls = []
        self.files = files or []
        self.error = error

    def sync(self, repo, token=None):
        from cheatsheets.repos import SyncResult

        self.calls.append((repo.full_name, token))
        if self.error:
            raise self.error
        return SyncResult(repository=repo.full_name, files=list(self.files))


@pytest.fixture
def syncer():
    return FakeSyncer(files=[Path("git.md")])


@pytest.fixture
def service(repository, syncer) -> RepositoryService:
    return RepositoryService(repository, syncer)
