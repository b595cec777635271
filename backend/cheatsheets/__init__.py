"""Outils de maintenance des cheatsheets et gestionnaire de dépôts suivis."""

__version__ = "1.0.0"
