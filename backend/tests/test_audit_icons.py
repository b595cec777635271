import json

import pytest

from cheatsheets.audit import IconAuditor, IndexNotFoundError, find_icon, list_icons

from conftest import write


def test_direct_map_entry_wins():
    assert find_icon("golang", {"go.svg", "golang.svg"}) == "go.svg"


def test_pattern_match_when_no_direct_entry():
    assert find_icon("react-native", {"react.svg"}) == "react.svg"
    assert find_icon("django", {"python.svg"}) == "python.svg"


def test_first_matching_pattern_with_existing_icon_wins():
    icons = {"database.svg", "mysql.svg"}

    assert find_icon("mysql-tips", icons) == "database.svg"
    assert find_icon("mysql-tips", {"mysql.svg"}) == "mysql.svg"


def test_pattern_ignored_when_icon_file_missing():
    assert find_icon("django", set()) is None


def test_falls_back_to_tech_named_icon():
    assert find_icon("elm", {"elm.svg"}) == "elm.svg"


def test_no_icon_found():
    assert find_icon("cobol", {"go.svg", "react.svg"}) is None


@pytest.fixture
def assets(paths):
    for icon in ["go.svg", "react.svg", "unused.svg"]:
        write(paths.assets_dir / icon, "<svg/>")
    index = [
        {"path": "go.md", "title": "Go", "tech": "golang", "status": "active", "lastReviewed": "2024-05-01"},
        {"path": "react.md", "title": "React", "tech": "react", "status": "active", "lastReviewed": "2024-05-01"},
        {"path": "cobol.md", "title": "Cobol", "tech": "cobol", "status": "active", "lastReviewed": "2024-05-01"},
        {"path": "bower.md", "title": "Bower", "tech": "bower", "status": "archived", "lastReviewed": "2024-05-01"},
    ]
    paths.index_path.write_text(json.dumps(index), encoding="utf-8")
    return paths.assets_dir


def test_analyze(paths, assets):
    analysis = IconAuditor(paths).analyze()

    assert analysis.required == ["go.svg", "react.svg"]
    assert analysis.unused == ["unused.svg"]
    assert analysis.missing == ["cobol"]
    assert analysis.usage == {"go.svg": ["golang"], "react.svg": ["react"]}


def test_unused_icons_are_archived(paths, assets):
    auditor = IconAuditor(paths)
    analysis = auditor.analyze()

    moved = auditor.archive_unused(analysis.unused)

    assert moved == ["unused.svg"]
    assert (paths.icons_archive_dir / "unused.svg").exists()
    assert list_icons(paths.assets_dir) == ["go.svg", "react.svg"]


def test_missing_list_has_one_icon_per_line(paths, assets):
    auditor = IconAuditor(paths)

    output = auditor.write_missing_list(["cobol", "fortran"])

    assert output == paths.missing_icons_path
    assert output.read_text(encoding="utf-8") == "cobol.svg\nfortran.svg"


def test_empty_missing_list_writes_nothing(paths, assets):
    assert IconAuditor(paths).write_missing_list([]) is None
    assert not paths.missing_icons_path.exists()


def test_dry_run_keeps_icons_in_place(paths, assets):
    auditor = IconAuditor(paths, dry_run=True)

    assert auditor.archive_unused(["unused.svg"]) == ["unused.svg"]
    assert (paths.assets_dir / "unused.svg").exists()


def test_missing_index_raises(paths):
    with pytest.raises(IndexNotFoundError):
        IconAuditor(paths).analyze()
