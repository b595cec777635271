"""Scripts de maintenance des cheatsheets et des icônes."""

from .outdated import OUTDATED_TECHS, OUTDATED_PATTERNS, is_outdated, matching_rule
from .cheatsheets import AuditResult, CheatsheetAuditor, load_index
from .icons import (
    ICON_PATTERNS,
    TECH_TO_ICON_MAP,
    IconAnalysis,
    IconAuditor,
    IndexNotFoundError,
    find_icon,
    list_icons,
    load_active_cheatsheets,
)

__all__ = [
    # Obsolescence
    "OUTDATED_TECHS",
    "OUTDATED_PATTERNS",
    "is_outdated",
    "matching_rule",
    # Audit des cheatsheets
    "AuditResult",
    "CheatsheetAuditor",
    "load_index",
    # Icônes
    "ICON_PATTERNS",
    "TECH_TO_ICON_MAP",
    "IconAnalysis",
    "IconAuditor",
    "IndexNotFoundError",
    "find_icon",
    "list_icons",
    "load_active_cheatsheets",
]
