"""Audit des cheatsheets : archivage, mise à jour du frontmatter, index.json."""

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Optional
import json
import logging
import shutil

import frontmatter
import yaml
from tqdm import tqdm

from ..config import AppPaths
from ..parsers import CheatsheetParser, CheatsheetMetadata, ParsedCheatsheet, STATUS_ARCHIVED
from .outdated import matching_rule

logger = logging.getLogger(__name__)


@dataclass
class AuditResult:
    """Résultat d'un audit, une liste par décision."""

    kept: list[CheatsheetMetadata] = field(default_factory=list)
    updated: list[CheatsheetMetadata] = field(default_factory=list)
    archived: list[CheatsheetMetadata] = field(default_factory=list)
    errors: list[tuple[str, str]] = field(default_factory=list)

    @property
    def active(self) -> list[CheatsheetMetadata]:
        return self.kept + self.updated

    @property
    def total(self) -> int:
        return len(self.kept) + len(self.updated) + len(self.archived)


class CheatsheetAuditor:
    """Classe les cheatsheets en obsolètes / à jour et réécrit leurs métadonnées."""

    def __init__(
        self,
        paths: AppPaths,
        today: Optional[date] = None,
        dry_run: bool = False,
        show_progress: bool = False,
    ):
        self.paths = paths
        self.today = today or date.today()
        self.dry_run = dry_run
        self.show_progress = show_progress
        self.parser = CheatsheetParser(paths.cheatsheets_dir)

    @property
    def reviewed_on(self) -> str:
        return self.today.isoformat()

    def run(self) -> AuditResult:
        """Audite toutes les cheatsheets du dossier."""
        archive_dir = self.paths.cheatsheets_archive_dir
        if not self.dry_run:
            archive_dir.mkdir(parents=True, exist_ok=True)

        result = AuditResult()
        files = self.parser.list_cheatsheets()
        logger.info(f"Found {len(files)} cheatsheets to audit")

        iterator = tqdm(files, desc="Auditing cheatsheets") if self.show_progress else files
        for file_path in iterator:
            logger.debug(f"Processing: {file_path.name}")
            try:
                cheatsheet = self.parser.parse(file_path, self.reviewed_on)
                self._process(cheatsheet, result)
            except (OSError, UnicodeDecodeError, ValueError, yaml.YAMLError) as e:
                # frontmatter invalide ou fichier illisible : on passe au suivant
                logger.error(f"Error processing {file_path.name}: {e}")
                result.errors.append((file_path.name, str(e)))

        return result

    def _process(self, cheatsheet: ParsedCheatsheet, result: AuditResult) -> None:
        metadata = cheatsheet.metadata
        match = matching_rule(metadata.path, cheatsheet.raw_content)

        if match is not None:
            logger.info(f"{metadata.path} -> ARCHIVING ({match.source}: {match.rule})")
            if not self.dry_run:
                target = self.paths.cheatsheets_archive_dir / metadata.path
                shutil.move(str(cheatsheet.file_path), str(target))
            metadata.status = STATUS_ARCHIVED
            result.archived.append(metadata)
            return

        if CheatsheetParser.needs_update(cheatsheet.post):
            logger.info(f"{metadata.path} -> UPDATING front-matter")
            if not self.dry_run:
                self._write_frontmatter(cheatsheet)
            result.updated.append(metadata)
        else:
            logger.debug(f"{metadata.path} -> KEEPING")
            result.kept.append(metadata)

    def _write_frontmatter(self, cheatsheet: ParsedCheatsheet) -> None:
        """Fusionne les métadonnées calculées dans le frontmatter existant."""
        metadata = cheatsheet.metadata
        post = frontmatter.Post(cheatsheet.post.content)
        post.metadata.update(cheatsheet.frontmatter)
        post.metadata.update(
            {
                "title": metadata.title,
                "tech": metadata.tech,
                "status": metadata.status,
                "lastReviewed": metadata.last_reviewed,
            }
        )
        if metadata.version:
            post.metadata["version"] = metadata.version

        with open(cheatsheet.file_path, "w", encoding="utf-8") as f:
            f.write(frontmatter.dumps(post, sort_keys=False) + "\n")

    def generate_index(self, result: AuditResult) -> list[dict]:
        """Écrit index.json avec les cheatsheets actives uniquement."""
        index_data = [cheatsheet.to_dict() for cheatsheet in result.active]

        if not self.dry_run:
            index_path = self.paths.index_path
            index_path.parent.mkdir(parents=True, exist_ok=True)
            with open(index_path, "w", encoding="utf-8") as f:
                json.dump(index_data, f, indent=2, ensure_ascii=False)
            logger.info(f"Generated {index_path} with {len(index_data)} active cheatsheets")

        return index_data


def load_index(index_path: str | Path) -> list[CheatsheetMetadata]:
    """Relit un index.json généré."""
    with open(index_path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return [CheatsheetMetadata.from_dict(item) for item in data]
