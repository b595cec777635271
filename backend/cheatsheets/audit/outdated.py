"""Détection des cheatsheets obsolètes (technos retirées ou versions périmées)."""

from dataclasses import dataclass
from typing import Optional
import re

# Technos retirées : la cheatsheet est archivée si son nom de fichier correspond
OUTDATED_TECHS = frozenset({
    "angularjs",        # AngularJS 1.x en fin de vie
    "bower",            # Remplacé par npm/yarn
    "grunt",            # Remplacé par webpack/vite
    "gulp3",
    "tslint",           # Remplacé par ESLint
    "babel6",
    "jasmine1",
    "mocha1",
    "karma",
    "browserify",
    "systemjs",         # Remplacé par les modules ES
    "jspm",
    "browser-sync",
    "live-reload",
    "nodemon",
    "pm2",
    "forever",
    "supervisor",
    "grunt-contrib",
    "gulp-contrib",
    "yeoman",
    "bower-installer",
    "component",        # Gestionnaires de paquets remplacés par npm
    "duo",
    "jam",
    "volo",
    "ender",
    "spm",
    "componentjs",
    "jamjs",
    "volojs",
    "enderjs",
    "spmjs",
})

# Versions périmées, testées sur le nom du fichier et sur le contenu
_OUTDATED_VERSION_RULES = [
    r"angularjs.*1\.",
    r"react.*0\.",
    r"vue.*1\.",
    r"ember.*1\.",
    r"backbone.*0\.",
    r"jquery.*1\.",
    r"bootstrap.*2\.",
    r"bootstrap.*3\.",
    r"node.*0\.",
    r"node.*4\.",
    r"node.*6\.",
    r"node.*8\.",
    r"node.*10\.",
    r"python.*2\.",
    r"ruby.*1\.",
    r"ruby.*2\.",
    r"php.*5\.",
    r"php.*7\.",
    r"mysql.*4\.",
    r"mysql.*5\.",
    r"postgresql.*8\.",
    r"postgresql.*9\.",
    r"mongodb.*2\.",
    r"mongodb.*3\.",
    r"redis.*2\.",
    r"redis.*3\.",
    r"docker.*1\.",
    r"kubernetes.*1\.",
    r"aws.*cli.*1\.",
    r"terraform.*0\.",
    r"ansible.*1\.",
    r"chef.*11\.",
    r"puppet.*3\.",
    r"vagrant.*1\.",
    r"virtualbox.*4\.",
    r"vmware.*5\.",
    r"hyper-v.*1\.",
    r"xen.*4\.",
    r"kvm.*1\.",
    r"lxc.*1\.",
    r"lxd.*2\.",
    r"systemd.*200\.",
    r"upstart.*0\.",
    r"sysvinit.*0\.",
    r"runit.*0\.",
    r"s6.*0\.",
    r"daemontools.*0\.",
    r"supervisor.*3\.",
    r"monit.*5\.",
    r"god.*0\.",
    r"bluepill.*0\.",
    r"eye.*0\.",
    r"foreman.*0\.",
    r"honcho.*0\.",
    r"circus.*0\.",
    r"supervisord.*3\.",
]

OUTDATED_PATTERNS: list[re.Pattern] = [
    re.compile(rule, re.IGNORECASE) for rule in dict.fromkeys(_OUTDATED_VERSION_RULES)
]


@dataclass
class OutdatedMatch:
    """Règle qui a déclenché l'archivage."""

    rule: str
    source: str  # "tech" | "filename" | "content"


def _base_name(filename: str) -> str:
    name = filename.replace("\\", "/").rsplit("/", 1)[-1]
    return name[:-3] if name.endswith(".md") else name


def matching_rule(filename: str, content: str) -> Optional[OutdatedMatch]:
    """Retourne la première règle d'obsolescence qui s'applique, sinon None."""
    base = _base_name(filename)
    if base in OUTDATED_TECHS:
        return OutdatedMatch(rule=base, source="tech")

    for pattern in OUTDATED_PATTERNS:
        if pattern.search(filename):
            return OutdatedMatch(rule=pattern.pattern, source="filename")
        if pattern.search(content):
            return OutdatedMatch(rule=pattern.pattern, source="content")

    return None


def is_outdated(filename: str, content: str) -> bool:
    """Vrai si le nom ou le contenu de la cheatsheet correspond à une règle."""
    return matching_rule(filename, content) is not None
