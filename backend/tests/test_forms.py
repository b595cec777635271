from cheatsheets.repos import AddRepositoryForm, DraftStore, EditRepositoryForm, filter_repositories


def test_add_form_rejects_empty_required_fields(service, repository):
    form = AddRepositoryForm(DraftStore(repository))
    form.update("name", "   ")

    assert form.errors() == {}
    assert form.submit(service) is None
    assert form.errors() == {
        "name": "Repository name is required",
        "owner": "Owner is required",
    }
    assert repository.list_repositories() == []


def test_add_form_keeps_drafts_between_sessions(service, repository):
    form = AddRepositoryForm(DraftStore(repository))
    form.update("name", "sheets")
    form.update("is_private", True)

    reopened = AddRepositoryForm(DraftStore(repository))

    assert reopened.values["name"] == "sheets"
    assert reopened.values["is_private"] is True
    assert reopened.values["owner"] == ""
    assert reopened.values["default_branch"] == "main"


def test_failed_submission_keeps_drafts(service, repository):
    form = AddRepositoryForm(DraftStore(repository))
    form.update("name", "sheets")

    assert form.submit(service) is None
    assert repository.get_draft("add-repo-name") == "sheets"


def test_successful_submission_clears_drafts(service, repository):
    form = AddRepositoryForm(DraftStore(repository))
    form.update("name", "sheets")
    form.update("owner", "octo")
    form.update("default_branch", "develop")

    repo = form.submit(service)

    assert repo.full_name == "octo/sheets"
    assert repo.default_branch == "develop"
    assert repo.url == "https://github.com/octo/sheets"
    assert repository.list_drafts() == {}
    assert AddRepositoryForm(DraftStore(repository)).values["name"] == ""


def test_reset_clears_drafts(repository):
    form = AddRepositoryForm(DraftStore(repository))
    form.update("owner", "octo")

    form.reset()

    assert form.values["owner"] == ""
    assert repository.get_draft("add-repo-owner") is None


def test_draft_equal_to_default_is_ignored(repository):
    repository.set_draft("add-repo-branch", "main")

    assert DraftStore(repository).load("add-repo-branch", "main") == "main"
    assert DraftStore(repository).load("add-repo-url", "") == ""


def test_edit_form_is_prepopulated(service):
    repo = service.add_user_repository("sheets", "octo", default_branch="develop")

    form = EditRepositoryForm(repo)

    assert form.values == {
        "name": "sheets",
        "owner": "octo",
        "description": "",
        "url": "https://github.com/octo/sheets",
        "default_branch": "develop",
    }


def test_edit_form_validates_and_updates(service):
    repo = service.add_user_repository("sheets", "octo", description="Old")
    form = EditRepositoryForm(repo)

    form.update("owner", "")
    assert form.submit(service) is None
    assert form.errors() == {"owner": "Owner is required"}

    form.update("owner", " hubber ")
    form.update("description", "  ")
    updated = form.submit(service)

    assert updated.owner == "hubber"
    assert updated.description is None
    assert updated.name == "sheets"


def test_edit_form_clearing_url_regenerates_it(service):
    repo = service.add_user_repository("sheets", "octo", url="https://example.com/x")
    form = EditRepositoryForm(repo)

    form.update("url", "")
    updated = form.submit(service)

    assert updated.url == "https://github.com/octo/sheets"


def test_filter_repositories(service):
    service.add_user_repository("dotfiles", "alice", description="Shell configs")
    service.add_user_repository("sheets", "bob")
    repos = service.get_user_repositories()

    assert [r.name for r in filter_repositories(repos, "SHELL")] == ["dotfiles"]
    assert [r.name for r in filter_repositories(repos, "bob")] == ["sheets"]
    assert len(filter_repositories(repos, "")) == 2
    assert filter_repositories(repos, "nothing") == []
