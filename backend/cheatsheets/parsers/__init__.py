"""Parsers pour les cheatsheets Markdown."""

from .cheatsheet_parser import (
    CheatsheetParser,
    CheatsheetMetadata,
    ParsedCheatsheet,
    STATUS_ACTIVE,
    STATUS_ARCHIVED,
)

__all__ = [
    "CheatsheetParser",
    "CheatsheetMetadata",
    "ParsedCheatsheet",
    "STATUS_ACTIVE",
    "STATUS_ARCHIVED",
]
