"""Parser pour les cheatsheets Markdown avec extraction de métadonnées."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import re

import frontmatter

STATUS_ACTIVE = "active"
STATUS_ARCHIVED = "archived"

# Champs du frontmatter qui doivent tous être renseignés
REQUIRED_FRONTMATTER_FIELDS = ("title", "tech", "status", "lastReviewed")


@dataclass
class CheatsheetMetadata:
    """Métadonnées d'une cheatsheet, telles qu'écrites dans index.json."""

    path: str
    title: str
    tech: str
    version: Optional[str] = None
    status: str = STATUS_ACTIVE
    last_reviewed: str = ""

    def to_dict(self) -> dict:
        """Sérialise avec les clés du frontmatter (version omise si absente)."""
        data = {
            "path": self.path,
            "title": self.title,
            "tech": self.tech,
        }
        if self.version is not None:
            data["version"] = self.version
        data["status"] = self.status
        data["lastReviewed"] = self.last_reviewed
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "CheatsheetMetadata":
        version = data.get("version")
        return cls(
            path=data["path"],
            title=data.get("title", ""),
            tech=data.get("tech", ""),
            version=str(version) if version is not None else None,
            status=data.get("status", STATUS_ACTIVE),
            last_reviewed=str(data.get("lastReviewed", "")),
        )


@dataclass
class ParsedCheatsheet:
    """Cheatsheet lue depuis le disque."""

    file_path: Path
    raw_content: str
    post: frontmatter.Post
    metadata: CheatsheetMetadata
    frontmatter: dict = field(default_factory=dict)


class CheatsheetParser:
    """Lit les cheatsheets d'un dossier et en déduit les métadonnées."""

    HEADING_PATTERN = re.compile(r"^#\s+(.+)$", re.MULTILINE)
    FILENAME_VERSION_PATTERN = re.compile(r"@([0-9.]+)")
    CONTENT_VERSION_PATTERN = re.compile(r"version[:\s]+([0-9.]+)", re.IGNORECASE)

    # Alias courts vers le nom canonique de la techno
    TECH_ALIASES = {
        "js": "javascript",
        "ts": "typescript",
        "py": "python",
        "rb": "ruby",
        "go": "golang",
        "rs": "rust",
        "kt": "kotlin",
        "typescript": "typescript",
        "javascript": "javascript",
        "python": "python",
        "ruby": "ruby",
        "php": "php",
        "golang": "golang",
        "rust": "rust",
        "cpp": "cpp",
        "c": "c",
        "java": "java",
        "kotlin": "kotlin",
        "swift": "swift",
        "dart": "dart",
        "scala": "scala",
        "clojure": "clojure",
        "haskell": "haskell",
        "ocaml": "ocaml",
        "fsharp": "fsharp",
        "erlang": "erlang",
        "elixir": "elixir",
        "elm": "elm",
        "purescript": "purescript",
        "reason": "reason",
        "rescript": "rescript",
        "coffeescript": "coffeescript",
    }

    def __init__(self, cheatsheets_dir: str | Path):
        self.cheatsheets_dir = Path(cheatsheets_dir)

    def list_cheatsheets(self) -> list[Path]:
        """Liste les fichiers .md du dossier (hors fichiers préfixés par _)."""
        if not self.cheatsheets_dir.is_dir():
            return []
        files = [
            path
            for path in self.cheatsheets_dir.iterdir()
            if path.is_file() and path.suffix == ".md" and not path.name.startswith("_")
        ]
        return sorted(files, key=lambda p: p.name)

    def parse(self, file_path: str | Path, reviewed_on: str) -> ParsedCheatsheet:
        """Parse une cheatsheet et calcule ses métadonnées."""
        path = Path(file_path)
        if not path.is_absolute():
            path = self.cheatsheets_dir / path

        with open(path, "r", encoding="utf-8") as f:
            raw_content = f.read()

        post = frontmatter.loads(raw_content)
        fm = dict(post.metadata) if post.metadata else {}

        metadata = CheatsheetMetadata(
            path=path.name,
            title=self.generate_title(path.name, post),
            tech=self.extract_tech(path.name),
            version=self.extract_version(path.name, raw_content),
            status=STATUS_ACTIVE,
            last_reviewed=reviewed_on,
        )

        return ParsedCheatsheet(
            file_path=path,
            raw_content=raw_content,
            post=post,
            metadata=metadata,
            frontmatter=fm,
        )

    @staticmethod
    def base_name(filename: str) -> str:
        name = Path(filename).name
        return name[:-3] if name.endswith(".md") else name

    def extract_tech(self, filename: str) -> str:
        """Déduit la techno depuis le nom du fichier (ex: react@18.md -> react)."""
        base = self.base_name(filename)

        # Fichiers versionnés
        if "@" in base:
            return base.split("@")[0]

        return self.TECH_ALIASES.get(base, base)

    def generate_title(self, filename: str, post: frontmatter.Post) -> str:
        """Titre : frontmatter, sinon premier H1, sinon nom du fichier."""
        title = post.get("title")
        if title:
            return str(title)

        h1_match = self.HEADING_PATTERN.search(post.content)
        if h1_match:
            return h1_match.group(1).strip()

        words = self.base_name(filename).split("-")
        return " ".join(word[:1].upper() + word[1:] for word in words)

    def extract_version(self, filename: str, content: str) -> Optional[str]:
        """Version depuis le nom du fichier (@x.y) ou le contenu (version: x.y)."""
        version_match = self.FILENAME_VERSION_PATTERN.search(self.base_name(filename))
        if version_match:
            return version_match.group(1)

        content_match = self.CONTENT_VERSION_PATTERN.search(content)
        if content_match:
            return content_match.group(1)

        return None

    @staticmethod
    def needs_update(post: frontmatter.Post) -> bool:
        """Vrai si un des champs obligatoires du frontmatter manque."""
        return any(not post.get(key) for key in REQUIRED_FRONTMATTER_FIELDS)
