"""Configuration des chemins utilisés par les scripts et le gestionnaire de dépôts."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import os

DEFAULT_ASSETS_DIR = Path("assets")
DEFAULT_DB_PATH = Path("data/repos.db")
DEFAULT_SYNC_DIR = Path("data/synced")

ARCHIVE_DIR_NAME = "_archive"
INDEX_FILE_NAME = "index.json"
MISSING_ICONS_FILE_NAME = "missing-icons.txt"


@dataclass(frozen=True)
class AppPaths:
    """Chemins de travail (assets, cheatsheets, base SQLite)."""

    assets_dir: Path = DEFAULT_ASSETS_DIR
    db_path: Path = DEFAULT_DB_PATH
    sync_dir: Path = DEFAULT_SYNC_DIR
    cheatsheets_dir: Optional[Path] = None

    def __post_init__(self):
        # Les cheatsheets vivent par défaut dans assets/cheatsheets
        if self.cheatsheets_dir is None:
            object.__setattr__(self, "cheatsheets_dir", self.assets_dir / "cheatsheets")

    @property
    def index_path(self) -> Path:
        return self.cheatsheets_dir / INDEX_FILE_NAME

    @property
    def cheatsheets_archive_dir(self) -> Path:
        return self.cheatsheets_dir / ARCHIVE_DIR_NAME

    @property
    def icons_archive_dir(self) -> Path:
        return self.assets_dir / ARCHIVE_DIR_NAME

    @property
    def missing_icons_path(self) -> Path:
        return self.assets_dir / MISSING_ICONS_FILE_NAME


def load_paths(
    assets_dir: Optional[str | Path] = None,
    db_path: Optional[str | Path] = None,
    sync_dir: Optional[str | Path] = None,
) -> AppPaths:
    """Construit les chemins : arguments explicites, puis variables d'environnement."""
    assets = assets_dir or os.environ.get("CHEATSHEETS_ASSETS_DIR") or DEFAULT_ASSETS_DIR
    db = db_path or os.environ.get("CHEATSHEETS_DB_PATH") or DEFAULT_DB_PATH
    sync = sync_dir or os.environ.get("CHEATSHEETS_SYNC_DIR") or DEFAULT_SYNC_DIR
    return AppPaths(assets_dir=Path(assets), db_path=Path(db), sync_dir=Path(sync))


def github_token() -> Optional[str]:
    """Token d'accès GitHub pour la synchronisation (optionnel)."""
    return os.environ.get("GITHUB_TOKEN") or None


def ensure_parent(path: Path) -> None:
    """Crée le dossier parent d'un fichier si nécessaire."""
    Path(path).parent.mkdir(parents=True, exist_ok=True)
