"""Commandes `cheatsheets repos ...` : liste, ajout, édition, suppression, synchro."""

from typing import Optional
import json
import logging

import click

from ..config import AppPaths, github_token, load_paths
from ..database import Repository, TrackedRepository
from .forms import AddRepositoryForm, DraftStore, EditRepositoryForm, filter_repositories
from .service import RepositoryService
from .sync import GitHubSyncer

logger = logging.getLogger(__name__)


def build_service(paths: AppPaths) -> RepositoryService:
    """Instancie le service sur la base SQLite configurée."""
    repository = Repository(paths.db_path)
    return RepositoryService(repository, GitHubSyncer(paths.sync_dir))


def _service(ctx: click.Context) -> RepositoryService:
    obj = ctx.ensure_object(dict)
    if "service" not in obj:
        paths = obj.get("paths") or load_paths()
        service = build_service(paths)
        obj["service"] = service
        ctx.call_on_close(service.repository.close)
    return obj["service"]


def notify_failure(ctx: click.Context, title: str, error: Exception) -> None:
    """Affiche une erreur sur une ligne et termine avec le code 1."""
    logger.debug(title, exc_info=error)
    # les erreurs SQLAlchemy ajoutent une ligne "Background on this error"
    lines = str(error).strip().splitlines()
    summary = lines[0] if lines else type(error).__name__
    click.secho(f"❌ {title}: {summary}", fg="red", err=True)
    ctx.exit(1)


def _load(ctx: click.Context, repository_id: str) -> TrackedRepository:
    try:
        return _service(ctx).get_user_repository(repository_id)
    except Exception as e:
        notify_failure(ctx, "Failed to load repository", e)


def format_accessories(repo: TrackedRepository) -> str:
    parts = [f"👤 {repo.owner}", f"🌿 {repo.default_branch}"]
    if repo.subdirectory:
        parts.append(f"📁 {repo.subdirectory}")
    if repo.last_synced_at:
        parts.append(f"🔄 {repo.last_synced_at:%Y-%m-%d %H:%M}")
    return "  ".join(parts)


def format_details(repo: TrackedRepository) -> list[str]:
    return [
        f"# {repo.full_name}",
        "",
        repo.description or "No description",
        "",
        f"ID:             {repo.id}",
        f"URL:            {repo.url}",
        f"Visibility:     {'Private' if repo.is_private else 'Public'}",
        f"Default branch: {repo.default_branch}",
        f"Subdirectory:   {repo.subdirectory or '-'}",
        "Last synced:    "
        + (repo.last_synced_at.isoformat(sep=" ", timespec="seconds") if repo.last_synced_at else "never"),
    ]


@click.group()
def repos():
    """Gère la liste des dépôts de cheatsheets suivis."""


@repos.command("list")
@click.option("--search", "search_text", default="", help="Filtre sur nom, propriétaire, description")
@click.option("--json", "as_json", is_flag=True, help="Sortie JSON")
@click.pass_context
def list_repos(ctx: click.Context, search_text: str, as_json: bool):
    """Liste les dépôts suivis."""
    try:
        all_repos = _service(ctx).get_user_repositories()
    except Exception as e:
        notify_failure(ctx, "Failed to load repositories", e)

    filtered = filter_repositories(all_repos, search_text)

    if as_json:
        click.echo(json.dumps([repo.to_dict() for repo in filtered], indent=2))
        return

    click.echo(f"Your Repositories ({len(filtered)} repositories)")
    if not filtered:
        click.echo("📦 No repositories found")
        if search_text:
            click.echo(f'   No repositories match "{search_text}"')
        else:
            click.echo("   Add your first repository to get started")
        return

    for repo in filtered:
        icon = "🔒" if repo.is_private else "📦"
        subtitle = repo.description or repo.full_name
        click.echo(f"{icon} {repo.name}  {subtitle}")
        click.echo(f"   {format_accessories(repo)}")
        click.echo(f"   id: {repo.id}")


@repos.command("add")
@click.option("--name", help="Repository name (e.g. 'my-awesome-project')")
@click.option("--owner", help="Owner/username (e.g. 'octocat')")
@click.option("--description", help="Optional repository description")
@click.option("--url", help="Repository URL (generated when empty)")
@click.option("--private/--public", "is_private", default=None, help="Repository visibility")
@click.option("--branch", "default_branch", help="Default branch name (e.g. 'main')")
@click.option("--reset", is_flag=True, help="Vide le brouillon du formulaire")
@click.pass_context
def add_repo(
    ctx: click.Context,
    name: Optional[str],
    owner: Optional[str],
    description: Optional[str],
    url: Optional[str],
    is_private: Optional[bool],
    default_branch: Optional[str],
    reset: bool,
):
    """Ajoute un dépôt. Les valeurs saisies sont gardées en brouillon jusqu'au succès."""
    provided = {
        "name": name,
        "owner": owner,
        "description": description,
        "url": url,
        "is_private": is_private,
        "default_branch": default_branch,
    }

    try:
        service = _service(ctx)
        form = AddRepositoryForm(DraftStore(service.repository))
        if reset:
            form.reset()
        else:
            for field_id, value in provided.items():
                if value is not None:
                    form.update(field_id, value)
            repo = form.submit(service)
    except Exception as e:
        notify_failure(ctx, "Failed to add repository", e)

    if reset:
        click.secho("✓ Form Reset", fg="green")
        return

    if repo is None:
        for message in form.errors().values():
            click.secho(f"❌ {message}", fg="red", err=True)
        click.echo("Draft saved; re-run with the missing fields.", err=True)
        ctx.exit(1)

    click.secho(f"✓ Added {repo.full_name} ({repo.id})", fg="green")


@repos.command("edit")
@click.argument("repository_id")
@click.option("--name")
@click.option("--owner")
@click.option("--description")
@click.option("--url")
@click.option("--branch", "default_branch")
@click.pass_context
def edit_repo(
    ctx: click.Context,
    repository_id: str,
    name: Optional[str],
    owner: Optional[str],
    description: Optional[str],
    url: Optional[str],
    default_branch: Optional[str],
):
    """Modifie un dépôt (les options absentes gardent la valeur actuelle)."""
    repo = _load(ctx, repository_id)
    form = EditRepositoryForm(repo)

    provided = {
        "name": name,
        "owner": owner,
        "description": description,
        "url": url,
        "default_branch": default_branch,
    }
    for field_id, value in provided.items():
        if value is not None:
            form.update(field_id, value)

    try:
        updated = form.submit(_service(ctx))
    except Exception as e:
        notify_failure(ctx, "Failed to update repository", e)

    if updated is None:
        for message in form.errors().values():
            click.secho(f"❌ {message}", fg="red", err=True)
        ctx.exit(1)

    click.secho(f"✓ Updated {updated.full_name}", fg="green")


@repos.command("show")
@click.argument("repository_id")
@click.pass_context
def show_repo(ctx: click.Context, repository_id: str):
    """Affiche le détail d'un dépôt."""
    repo = _load(ctx, repository_id)
    for line in format_details(repo):
        click.echo(line)


@repos.command("remove")
@click.argument("repository_id")
@click.option("--yes", "-y", is_flag=True, help="Ne pas demander de confirmation")
@click.pass_context
def remove_repo(ctx: click.Context, repository_id: str, yes: bool):
    """Retire un dépôt après confirmation."""
    repo = _load(ctx, repository_id)
    full_name = repo.full_name

    if not yes:
        confirmed = click.confirm(
            f'Are you sure you want to remove "{full_name}" from your repositories?',
            default=False,
        )
        if not confirmed:
            click.echo("Cancelled")
            return

    try:
        _service(ctx).remove_user_repository(repository_id)
    except Exception as e:
        notify_failure(ctx, "Failed to remove repository", e)

    click.secho(f"✓ Removed {full_name}", fg="green")


@repos.command("sync")
@click.argument("repository_id")
@click.pass_context
def sync_repo(ctx: click.Context, repository_id: str):
    """Télécharge les cheatsheets du dépôt."""
    repo = _load(ctx, repository_id)
    try:
        result = _service(ctx).sync_repository_files(repo, github_token())
    except Exception as e:
        notify_failure(ctx, "Failed to sync repository", e)

    click.secho(f"✓ Synced {len(result.files)} files from {result.repository}", fg="green")


@repos.command("open")
@click.argument("repository_id")
@click.option("--browser", is_flag=True, help="Ouvre l'URL dans le navigateur")
@click.pass_context
def open_repo(ctx: click.Context, repository_id: str, browser: bool):
    """Affiche (ou ouvre) l'URL du dépôt."""
    repo = _load(ctx, repository_id)
    click.echo(repo.url)
    if browser:
        click.launch(repo.url)
