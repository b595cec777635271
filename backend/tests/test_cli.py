import json

import pytest
from click.testing import CliRunner

from cheatsheets.database import Repository
from cheatsheets.main import cli

from conftest import write


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def invoke(runner, paths):
    def _invoke(*args, input=None):
        base = ["--assets-dir", str(paths.assets_dir), "--db-path", str(paths.db_path)]
        return runner.invoke(cli, base + list(args), input=input)

    return _invoke


def _only_repo(paths):
    repository = Repository(paths.db_path)
    try:
        repos = repository.list_repositories()
        assert len(repos) == 1
        return repos[0].id
    finally:
        repository.close()


def test_add_then_list(invoke, paths):
    result = invoke("repos", "add", "--name", "sheets", "--owner", "octo", "--private")

    assert result.exit_code == 0, result.output
    assert "Added octo/sheets" in result.output

    listing = invoke("repos", "list")
    assert "Your Repositories (1 repositories)" in listing.output
    assert "🔒 sheets  octo/sheets" in listing.output


def test_add_without_owner_fails_and_keeps_draft(invoke, paths):
    result = invoke("repos", "add", "--name", "sheets")

    assert result.exit_code == 1
    assert "Owner is required" in result.output

    # Le nom saisi est repris depuis le brouillon
    retry = invoke("repos", "add", "--owner", "octo")
    assert retry.exit_code == 0, retry.output
    assert "Added octo/sheets" in retry.output


def test_add_reset(invoke):
    invoke("repos", "add", "--name", "sheets")

    result = invoke("repos", "add", "--reset")
    assert "Form Reset" in result.output

    retry = invoke("repos", "add", "--owner", "octo")
    assert retry.exit_code == 1
    assert "Repository name is required" in retry.output


def test_empty_list_messages(invoke):
    assert "Add your first repository to get started" in invoke("repos", "list").output
    assert 'No repositories match "vim"' in invoke("repos", "list", "--search", "vim").output


def test_list_json(invoke):
    invoke("repos", "add", "--name", "sheets", "--owner", "octo", "--description", "Notes")

    data = json.loads(invoke("repos", "list", "--json").stdout)

    assert data[0]["name"] == "sheets"
    assert data[0]["description"] == "Notes"
    assert data[0]["isPrivate"] is False


def test_edit_keeps_unspecified_fields(invoke, paths):
    invoke("repos", "add", "--name", "sheets", "--owner", "octo", "--description", "Notes")
    repo_id = _only_repo(paths)

    result = invoke("repos", "edit", repo_id, "--branch", "develop")
    assert result.exit_code == 0, result.output

    details = invoke("repos", "show", repo_id).output
    assert "# octo/sheets" in details
    assert "Notes" in details
    assert "Default branch: develop" in details


def test_edit_rejects_blank_name(invoke, paths):
    invoke("repos", "add", "--name", "sheets", "--owner", "octo")
    repo_id = _only_repo(paths)

    result = invoke("repos", "edit", repo_id, "--name", " ")

    assert result.exit_code == 1
    assert "Repository name is required" in result.output


def test_remove_requires_confirmation(invoke, paths):
    invoke("repos", "add", "--name", "sheets", "--owner", "octo")
    repo_id = _only_repo(paths)

    declined = invoke("repos", "remove", repo_id, input="n\n")
    assert 'remove "octo/sheets" from your repositories?' in declined.output
    assert "Cancelled" in declined.output
    assert _only_repo(paths) == repo_id

    accepted = invoke("repos", "remove", repo_id, input="y\n")
    assert accepted.exit_code == 0, accepted.output
    assert "Removed octo/sheets" in accepted.output
    assert "Add your first repository" in invoke("repos", "list").output


def test_unknown_repository_is_reported(invoke):
    result = invoke("repos", "show", "missing")

    assert result.exit_code == 1
    assert "Failed to load repository" in result.output


def test_open_prints_url(invoke, paths):
    invoke("repos", "add", "--name", "sheets", "--owner", "octo")

    result = invoke("repos", "open", _only_repo(paths))

    assert result.output.strip() == "https://github.com/octo/sheets"


def test_audit_commands(invoke, paths):
    write(paths.cheatsheets_dir / "bower.md", "# Bower\n")
    write(paths.cheatsheets_dir / "vim.md", "# Vim\n\nPress `:wq`.\n")
    write(paths.assets_dir / "vim.svg", "<svg/>")
    write(paths.assets_dir / "old.svg", "<svg/>")

    audit = invoke("audit-cheatsheets")
    assert audit.exit_code == 0, audit.output
    assert "Archived: 1" in audit.output
    assert "- bower.md (bower)" in audit.output
    assert "Generated index.json with 1 active cheatsheets" in audit.output

    icons = invoke("audit-icons")
    assert icons.exit_code == 0, icons.output
    assert "Required icons: 1" in icons.output
    assert (paths.icons_archive_dir / "old.svg").exists()
    assert "All required icons are available." in icons.output


def test_audit_icons_without_index_fails(invoke):
    result = invoke("audit-icons")

    assert result.exit_code == 1
    assert "Icon audit failed" in result.output


@pytest.fixture
def fake_sync(monkeypatch):
    from conftest import FakeSyncer
    from cheatsheets.repos import RepositoryService
    from cheatsheets.repos import commands

    state = {"syncer": FakeSyncer(files=["git.md", "vim.md"])}

    def build(paths):
        return RepositoryService(Repository(paths.db_path), state["syncer"])

    monkeypatch.setattr(commands, "build_service", build)
    monkeypatch.setenv("GITHUB_TOKEN", "secret")
    return state


def test_sync_repository(invoke, paths, fake_sync):
    invoke("repos", "add", "--name", "sheets", "--owner", "octo")
    repo_id = _only_repo(paths)

    result = invoke("repos", "sync", repo_id)

    assert result.exit_code == 0, result.output
    assert "Synced 2 files from octo/sheets" in result.output
    assert fake_sync["syncer"].calls == [("octo/sheets", "secret")]
    assert "Last synced:    never" not in invoke("repos", "show", repo_id).output


def test_sync_failure_is_reported(invoke, paths, fake_sync):
    from conftest import FakeSyncer

    invoke("repos", "add", "--name", "sheets", "--owner", "octo")
    fake_sync["syncer"] = FakeSyncer(error=OSError("network down"))

    result = invoke("repos", "sync", _only_repo(paths))

    assert result.exit_code == 1
    assert "Failed to sync repository: network down" in result.output


@pytest.fixture
def corrupt_db(paths):
    paths.db_path.parent.mkdir(parents=True, exist_ok=True)
    paths.db_path.write_bytes(b"this is not a sqlite database" * 100)
    return paths.db_path


@pytest.mark.parametrize(
    "args, message",
    [
        (["repos", "add", "--name", "x", "--owner", "y"], "Failed to add repository"),
        (["repos", "add", "--reset"], "Failed to add repository"),
        (["repos", "edit", "abc", "--name", "z"], "Failed to load repository"),
        (["repos", "show", "abc"], "Failed to load repository"),
        (["repos", "list"], "Failed to load repositories"),
    ],
)
def test_storage_failure_is_reported_on_one_line(invoke, corrupt_db, args, message):
    result = invoke(*args)

    assert result.exit_code == 1
    errors = [line for line in result.output.splitlines() if line.startswith("❌")]
    assert len(errors) == 1
    assert errors[0].startswith(f"❌ {message}: ")
    assert "Background on this error" not in result.output
    assert "Traceback" not in result.output


def test_audit_icons_dry_run_reports_without_touching_files(invoke, paths):
    write(paths.cheatsheets_dir / "vim.md", "# Vim\n\nPress `:wq`.\n")
    write(paths.cheatsheets_dir / "cobol.md", "# Cobol\n")
    write(paths.assets_dir / "vim.svg", "<svg/>")
    write(paths.assets_dir / "old.svg", "<svg/>")
    invoke("audit-cheatsheets")

    result = invoke("audit-icons", "--dry-run")

    assert result.exit_code == 0, result.output
    assert "Would move 1 unused icons to _archive/" in result.output
    assert "Would create missing-icons.txt with 1 missing icons." in result.output
    assert (paths.assets_dir / "old.svg").exists()
    assert not paths.missing_icons_path.exists()
