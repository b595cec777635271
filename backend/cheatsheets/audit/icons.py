"""Réconciliation des icônes SVG avec les cheatsheets actives de index.json."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import json
import logging
import re
import shutil

from ..config import AppPaths
from ..parsers import CheatsheetMetadata, STATUS_ACTIVE

logger = logging.getLogger(__name__)


class IndexNotFoundError(FileNotFoundError):
    """index.json absent : l'audit des cheatsheets doit tourner avant."""


# Techno -> fichier d'icône attendu
TECH_TO_ICON_MAP = {
    "angular": "angular.svg",
    "awk": "awk.svg",
    "aws": "aws.svg",
    "bash": "bash.svg",
    "brew": "brew.svg",
    "css": "css.svg",
    "curl": "curl.svg",
    "docker": "docker.svg",
    "emacs": "emacs.svg",
    "fish": "fish.svg",
    "git": "git.svg",
    "github": "github.svg",
    "go": "go.svg",
    "golang": "go.svg",
    "graphql": "graphql.svg",
    "grep": "grep.svg",
    "html": "html.svg",
    "java": "java.svg",
    "javascript": "javascript.svg",
    "js": "javascript.svg",
    "jq": "jq.svg",
    "kotlin": "kotlin.svg",
    "kubernetes": "kubernetes.svg",
    "k8s": "kubernetes.svg",
    "linux": "linux.svg",
    "mac": "mac.svg",
    "macos": "mac.svg",
    "make": "make.svg",
    "mongodb": "mongodb.svg",
    "mysql": "mysql.svg",
    "nextjs": "nextjs.svg",
    "next": "nextjs.svg",
    "nginx": "nginx.svg",
    "node": "node.svg",
    "nodejs": "node.svg",
    "npm": "npm.svg",
    "nvm": "nvm.svg",
    "php": "php.svg",
    "pnpm": "pnpm.svg",
    "postgresql": "postgresql.svg",
    "postgres": "postgresql.svg",
    "python": "python.svg",
    "py": "python.svg",
    "react": "react.svg",
    "redis": "redis.svg",
    "ruby": "ruby.svg",
    "rb": "ruby.svg",
    "rust": "rust.svg",
    "rs": "rust.svg",
    "sed": "sed.svg",
    "sql": "sql.svg",
    "sqlite": "sqlite.svg",
    "ssh": "ssh.svg",
    "svelte": "svelte.svg",
    "swift": "swift.svg",
    "tailwind": "tailwind.svg",
    "terminal": "terminal.svg",
    "terraform": "terraform.svg",
    "tmux": "tmux.svg",
    "vim": "vim.svg",
    "vue": "vue.svg",
    "yarn": "yarn.svg",
    "zsh": "zsh.svg",
}


@dataclass(frozen=True)
class IconPattern:
    """Motif de techno associé à une icône partagée."""

    pattern: re.Pattern
    icon: str
    description: str

    def matches(self, tech: str) -> bool:
        return self.pattern.search(tech) is not None


def _pattern(regex: str, icon: str, description: str) -> IconPattern:
    return IconPattern(re.compile(regex), icon, description)


# Consultés dans l'ordre, la première icône existante gagne
ICON_PATTERNS: list[IconPattern] = [
    _pattern(r"^gh-|github|git-", "github.svg", "GitHub-related"),
    _pattern(r"^css-|css", "css.svg", "CSS-related"),
    _pattern(r"^html-|html", "html.svg", "HTML-related"),
    _pattern(r"^js-|javascript|jquery", "javascript.svg", "JavaScript-related"),
    _pattern(r"^nodejs-|node", "node.svg", "Node.js-related"),
    _pattern(r"^git-|git", "git.svg", "Git-related"),
    _pattern(r"^docker-|docker", "docker.svg", "Docker-related"),
    _pattern(r"^rails-|rails", "ruby.svg", "Rails-related"),
    _pattern(r"^phoenix-|phoenix", "elixir.svg", "Phoenix-related"),
    _pattern(r"^react-|react", "react.svg", "React-related"),
    _pattern(r"^vue-|vue", "vue.svg", "Vue-related"),
    _pattern(r"^express|koa|fastify", "node.svg", "Node.js frameworks"),
    _pattern(r"^mocha|jasmine|tape|qunit|jest", "javascript.svg", "Testing frameworks"),
    _pattern(r"^webpack|rollup|browserify|gulp", "javascript.svg", "Build tools"),
    _pattern(r"^bootstrap|bulma|tailwind", "css.svg", "CSS frameworks"),
    _pattern(r"^mysql|postgresql|mongodb|redis|sqlite", "database.svg", "Database-related"),
    _pattern(r"^bash|zsh|fish|sh-|terminal", "terminal.svg", "Terminal-related"),
    _pattern(r"^vim-|vim", "vim.svg", "Vim-related"),
    _pattern(r"^emacs|spacemacs", "emacs.svg", "Emacs-related"),
    _pattern(r"^python|py-|django|flask", "python.svg", "Python-related"),
    _pattern(r"^php|laravel|symfony", "php.svg", "PHP-related"),
    _pattern(r"^ruby|rb-|gem", "ruby.svg", "Ruby-related"),
    _pattern(r"^go|golang", "go.svg", "Go-related"),
    _pattern(r"^rust|rs-", "rust.svg", "Rust-related"),
    _pattern(r"^java|kotlin|spring", "java.svg", "Java-related"),
    _pattern(r"^swift|ios", "swift.svg", "Swift-related"),
    _pattern(r"^aws|awscli", "aws.svg", "AWS-related"),
    _pattern(r"^k8s|kubernetes", "kubernetes.svg", "Kubernetes-related"),
    _pattern(r"^terraform|tf-", "terraform.svg", "Terraform-related"),
    _pattern(r"^ansible", "ansible.svg", "Ansible-related"),
    _pattern(r"^chef", "chef.svg", "Chef-related"),
    _pattern(r"^docker", "docker.svg", "Docker-related"),
    _pattern(r"^nginx", "nginx.svg", "Nginx-related"),
    _pattern(r"^mysql", "mysql.svg", "MySQL-related"),
    _pattern(r"^postgresql|postgres", "postgresql.svg", "PostgreSQL-related"),
    _pattern(r"^mongodb|mongo", "mongodb.svg", "MongoDB-related"),
    _pattern(r"^redis", "redis.svg", "Redis-related"),
    _pattern(r"^sql", "sql.svg", "SQL-related"),
    _pattern(r"^ssh|scp", "ssh.svg", "SSH-related"),
    _pattern(r"^curl|httpie", "curl.svg", "HTTP clients"),
    _pattern(r"^grep|sed|awk", "grep.svg", "Text processing"),
    _pattern(r"^make|makefile", "make.svg", "Make-related"),
    _pattern(r"^npm|yarn|pnpm", "npm.svg", "Package managers"),
    _pattern(r"^linux|ubuntu|debian", "linux.svg", "Linux-related"),
    _pattern(r"^mac|macos|osx", "mac.svg", "macOS-related"),
    _pattern(r"^tmux|screen", "tmux.svg", "Terminal multiplexers"),
]


@dataclass
class IconAnalysis:
    """Icônes requises, inutilisées et manquantes."""

    required: list[str] = field(default_factory=list)
    unused: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)
    usage: dict[str, list[str]] = field(default_factory=dict)


def find_icon(tech: str, existing_icons: list[str] | set[str]) -> Optional[str]:
    """Trouve l'icône d'une techno : table directe, motifs, puis <tech>.svg."""
    existing = set(existing_icons)

    direct_icon = TECH_TO_ICON_MAP.get(tech)
    if direct_icon and direct_icon in existing:
        return direct_icon

    for icon_pattern in ICON_PATTERNS:
        if icon_pattern.matches(tech) and icon_pattern.icon in existing:
            return icon_pattern.icon

    direct_match = f"{tech}.svg"
    if direct_match in existing:
        return direct_match

    return None


def load_active_cheatsheets(index_path: str | Path) -> list[CheatsheetMetadata]:
    """Lit index.json et garde les cheatsheets actives."""
    index_path = Path(index_path)
    if not index_path.exists():
        raise IndexNotFoundError(f"{index_path} not found. Run audit-cheatsheets first.")

    with open(index_path, "r", encoding="utf-8") as f:
        data = json.load(f)

    return [
        CheatsheetMetadata.from_dict(item)
        for item in data
        if item.get("status") == STATUS_ACTIVE
    ]


def list_icons(assets_dir: str | Path) -> list[str]:
    """Fichiers .svg présents directement dans le dossier assets."""
    assets_dir = Path(assets_dir)
    if not assets_dir.is_dir():
        return []
    return sorted(
        path.name for path in assets_dir.iterdir() if path.is_file() and path.suffix == ".svg"
    )


class IconAuditor:
    """Compare les icônes du dossier assets aux technos de l'index."""

    def __init__(self, paths: AppPaths, dry_run: bool = False):
        self.paths = paths
        self.dry_run = dry_run

    def analyze(self) -> IconAnalysis:
        active_cheatsheets = load_active_cheatsheets(self.paths.index_path)
        existing_icons = list_icons(self.paths.assets_dir)

        logger.info(f"Analyzing icons for {len(active_cheatsheets)} active cheatsheets")

        required: set[str] = set()
        missing: list[str] = []
        usage: dict[str, list[str]] = {}

        for cheatsheet in active_cheatsheets:
            icon = find_icon(cheatsheet.tech, existing_icons)
            if icon:
                required.add(icon)
                usage.setdefault(icon, []).append(cheatsheet.tech)
            else:
                missing.append(cheatsheet.tech)

        unused = [icon for icon in existing_icons if icon not in required]

        return IconAnalysis(
            required=sorted(required),
            unused=sorted(unused),
            missing=sorted(missing),
            usage=usage,
        )

    def archive_unused(self, unused: list[str]) -> list[str]:
        """Déplace les icônes inutilisées dans assets/_archive."""
        if not unused:
            return []

        archive_dir = self.paths.icons_archive_dir
        moved = []

        for icon in unused:
            source = self.paths.assets_dir / icon
            if not source.exists():
                continue
            if not self.dry_run:
                archive_dir.mkdir(parents=True, exist_ok=True)
                shutil.move(str(source), str(archive_dir / icon))
            logger.info(f"{'Would move' if self.dry_run else 'Moved'} {icon} to {archive_dir.name}/")
            moved.append(icon)

        return moved

    def write_missing_list(self, missing: list[str]) -> Optional[Path]:
        """Écrit missing-icons.txt (un <tech>.svg par ligne)."""
        if not missing:
            return None

        output_path = self.paths.missing_icons_path
        if not self.dry_run:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            with open(output_path, "w", encoding="utf-8") as f:
                f.write("\n".join(f"{tech}.svg" for tech in missing))
        logger.info(f"{'Would create' if self.dry_run else 'Created'} {output_path.name} with {len(missing)} missing icons")
        return output_path
