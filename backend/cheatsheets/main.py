"""Point d'entrée principal : audits des cheatsheets/icônes et gestion des dépôts."""

import sys
import io

# Force UTF-8 encoding for Windows console
if sys.platform == 'win32':
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8', errors='replace')
    sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding='utf-8', errors='replace')

from typing import Optional
import logging
import time

import click

from .config import AppPaths, load_paths
from .audit import AuditResult, CheatsheetAuditor, IconAnalysis, IconAuditor
from .repos.commands import repos

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


@click.group()
@click.option(
    "--assets-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Dossier des assets (icônes SVG, sous-dossier cheatsheets/)",
)
@click.option(
    "--db-path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Chemin de la base SQLite des dépôts suivis",
)
@click.option("--verbose", is_flag=True, help="Mode verbeux")
@click.pass_context
def cli(ctx: click.Context, assets_dir: Optional[str], db_path: Optional[str], verbose: bool):
    """Outils de maintenance des cheatsheets."""
    configure_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["paths"] = load_paths(assets_dir=assets_dir, db_path=db_path)
    ctx.obj["verbose"] = verbose


def print_audit_summary(result: AuditResult) -> None:
    click.echo("\n📊 Audit Summary:")
    click.echo(f"  Kept: {len(result.kept)}")
    click.echo(f"  Updated: {len(result.updated)}")
    click.echo(f"  Archived: {len(result.archived)}")

    if result.archived:
        click.echo("\n📦 Archived cheatsheets:")
        for cheatsheet in result.archived:
            click.echo(f"  - {cheatsheet.path} ({cheatsheet.tech})")

    if result.errors:
        click.echo("\n⚠️  Skipped (unreadable):")
        for path, error in result.errors:
            click.echo(f"  - {path}: {error}")


def audit_cheatsheets(paths: AppPaths, dry_run: bool = False, show_progress: bool = False) -> AuditResult:
    """Audite les cheatsheets puis régénère index.json."""
    start_time = time.time()
    auditor = CheatsheetAuditor(paths, dry_run=dry_run, show_progress=show_progress)

    result = auditor.run()
    print_audit_summary(result)

    index_data = auditor.generate_index(result)
    click.echo(f"\nGenerated index.json with {len(index_data)} active cheatsheets")
    logger.debug(f"Audit finished in {time.time() - start_time:.1f}s")
    return result


def print_icon_report(analysis: IconAnalysis) -> None:
    click.echo("📋 Icon Usage Summary:")
    for icon, techs in analysis.usage.items():
        more = "..." if len(techs) > 3 else ""
        click.echo(f"  {icon}: {len(techs)} cheatsheets ({', '.join(techs[:3])}{more})")

    click.echo("\n🎨 Icon Analysis Report\n")
    click.echo("📈 Summary:")
    click.echo(f"  Required icons: {len(analysis.required)}")
    click.echo(f"  Unused icons: {len(analysis.unused)}")
    click.echo(f"  Missing icons: {len(analysis.missing)}\n")

    if analysis.required:
        click.echo("✅ Required Icons:")
        for icon in analysis.required:
            click.echo(f"  - {icon}")
        click.echo("")

    if analysis.unused:
        click.echo("🗑️  Unused Icons (can be removed):")
        for icon in analysis.unused:
            click.echo(f"  - {icon}")
        click.echo("")

    if analysis.missing:
        click.echo("❌ Missing Icons (need to be created):")
        for tech in analysis.missing:
            click.echo(f"  - {tech}.svg")
        click.echo("")


def audit_icons(paths: AppPaths, dry_run: bool = False) -> IconAnalysis:
    """Analyse les icônes, archive les inutilisées, liste les manquantes."""
    auditor = IconAuditor(paths, dry_run=dry_run)

    analysis = auditor.analyze()
    print_icon_report(analysis)

    moved = auditor.archive_unused(analysis.unused)
    if moved:
        verb = "Would move" if dry_run else "Moved"
        click.echo(f"🗑️  {verb} {len(moved)} unused icons to _archive/")
    else:
        click.echo("✅ No unused icons to remove.")

    missing_path = auditor.write_missing_list(analysis.missing)
    if missing_path:
        verb = "Would create" if dry_run else "Created"
        click.echo(f"📝 {verb} {missing_path.name} with {len(analysis.missing)} missing icons.")
    else:
        click.echo("✅ All required icons are available.")

    return analysis


@cli.command("audit-cheatsheets")
@click.option("--dry-run", is_flag=True, help="Classe sans déplacer ni réécrire de fichier")
@click.pass_context
def audit_cheatsheets_command(ctx: click.Context, dry_run: bool):
    """Archive les cheatsheets obsolètes et régénère index.json."""
    click.echo("🔍 Starting cheatsheets audit...")
    try:
        audit_cheatsheets(ctx.obj["paths"], dry_run=dry_run, show_progress=ctx.obj["verbose"])
    except Exception as e:
        logger.exception(f"Audit failed: {e}")
        click.secho(f"❌ Audit failed: {e}", fg="red", err=True)
        ctx.exit(1)
    click.echo("\n✅ Audit complete!")


@cli.command("audit-icons")
@click.option("--dry-run", is_flag=True, help="Analyse sans déplacer ni écrire de fichier")
@click.pass_context
def audit_icons_command(ctx: click.Context, dry_run: bool):
    """Réconcilie les icônes SVG avec index.json."""
    click.echo("🎨 Starting icon audit...\n")
    try:
        audit_icons(ctx.obj["paths"], dry_run=dry_run)
    except Exception as e:
        logger.exception(f"Icon audit failed: {e}")
        click.secho(f"❌ Icon audit failed: {e}", fg="red", err=True)
        ctx.exit(1)
    click.echo("✅ Icon audit complete!")


cli.add_command(repos)


if __name__ == "__main__":
    cli()
