"""Command-line front-end: fca-install.

Parses flags, prompts for a target when none is given, then hands a fully
resolved target to one of the deployment strategies. Everything printed to the
user lives here; the core modules only log.
"""

import logging

import click

from .exceptions import DeployError
from .exceptions import ValidationFailedError
from .installer import CopyStrategy
from .installer import InstallKind
from .installer import InstallSummary
from .installer import UninstallSummary
from .installer import invocation_list
from .ledger import LedgerStatus
from .ledger import VersionLedger
from .protocols import DeploymentStrategy
from .resolver import TargetResolver
from .schema import DeploymentTarget
from .schema import DeployMode
from .schema import PluginManifest
from .schema import load_default_manifest
from .symlink import LinkAction
from .symlink import LinkSummary
from .symlink import SymlinkStrategy

logger = logging.getLogger(__name__)

EXIT_ERROR = 1
EXIT_PARTIAL = 3

PROG = "fca-install"


def user_output(message: str = "") -> None:
    click.echo(message)


def error_output(message: str) -> None:
    click.echo(message, err=True)


def format_invocations(invocations: dict[str, str]) -> list[str]:
    width = max((len(name) for name in invocations), default=0)
    return [f"  {name.ljust(width)}  {description}" for name, description in invocations.items()]


def render_help(manifest: PluginManifest) -> str:
    title = manifest.title
    lines = [
        f"{title} installer (v{manifest.version})",
        "",
        f"Usage: {PROG} [OPTIONS]",
        "",
        "Options:",
        f"  --global, -g     Install to ~/{manifest.config_dir}/ (available in all projects)",
        f"  --local, -l      Install to {manifest.config_dir}/ in current project",
        "  --uninstall, -u  Remove installed files",
        "  --version, -v    Show installed and available versions",
        "  --symlink        Link skills into the skills directory instead of copying",
        "  --force          Overwrite drifted symlinks or files (requires --symlink)",
        "  --dry-run        Show what --symlink would do without making changes (requires --symlink)",
        "  --verbose        Enable debug logging",
        "  --help, -h       Show this help message",
        "",
        "Examples:",
        f"  {PROG}                     Interactive mode (choose global or local)",
        f"  {PROG} --global            Install globally to ~/{manifest.config_dir}/",
        f"  {PROG} --local             Install to current project's {manifest.config_dir}/",
        f"  {PROG} --uninstall         Remove from ~/{manifest.config_dir}/ (default)",
        f"  {PROG} --uninstall --local Remove from {manifest.config_dir}/",
        f"  {PROG} --version           Check installed version",
        "",
        "Commands:",
        *format_invocations(invocation_list(manifest)),
    ]
    return "\n".join(lines)


def render_version(manifest: PluginManifest, resolver: TargetResolver) -> str:
    lines = [f"{PROG} v{manifest.version} (package)"]
    for mode, label in ((DeployMode.GLOBAL, "Global install:"), (DeployMode.LOCAL, "Local install: ")):
        ledger = VersionLedger(resolver.resolve(mode).ledger_path)
        status = ledger.status(manifest.version)
        if status is LedgerStatus.NOT_INSTALLED:
            lines.append(f"  {label} {status.value}")
        else:
            lines.append(f"  {label} v{ledger.read()} ({status.value})")
    return "\n".join(lines)


def prompt_for_mode(manifest: PluginManifest) -> DeployMode:
    """Ask where to install; anything but a valid number means global."""
    config_dir = manifest.config_dir
    user_output(f"Where should {manifest.title} be installed?")
    user_output()
    user_output(f"  1) Global - ~/{config_dir}/ (available in all projects)")
    user_output(f"  2) Local - {config_dir}/ (current project only)")
    user_output()
    answer = click.prompt("Choose [1-2]", default="", show_default=False)
    choices = {"1": DeployMode.GLOBAL, "2": DeployMode.LOCAL}
    mode = choices.get(answer.strip())
    if mode is None:
        user_output("Invalid choice. Defaulting to global install.")
        mode = DeployMode.GLOBAL
    user_output()
    return mode


def report_install(summary: InstallSummary) -> None:
    if summary.kind is InstallKind.REINSTALL:
        user_output(f"v{summary.version} is already up to date. Reinstalled to ensure all files are current.")
    elif summary.kind is InstallKind.UPGRADE:
        user_output(f"Updated: v{summary.previous_version} -> v{summary.version}")

    user_output("Installed commands:")
    for name in summary.commands_written:
        user_output(f"  {name}")
    user_output("Installed knowledge modules:")
    for name in summary.knowledge_written:
        user_output(f"  {name}")
    user_output()
    user_output(
        f"Installed {summary.command_count} commands + {summary.knowledge_count} knowledge modules "
        f"- v{summary.version} ({summary.target_description})"
    )
    user_output()
    user_output("Invoke commands:")
    for line in format_invocations(summary.invocations):
        user_output(line)
    user_output()
    user_output("Tip: Use /clear before invoking a command for a fresh context window.")


def report_links(summary: LinkSummary) -> None:
    prefix = "[dry-run] " if summary.dry_run else ""
    for outcome in summary.outcomes:
        if outcome.action is LinkAction.DRIFTED:
            user_output(f"  WARNING: {outcome.name} {outcome.message}")
            user_output("           Use --force to overwrite.")
        elif outcome.action is LinkAction.SKIPPED:
            user_output(f"  Skipped: {outcome.name} ({outcome.message})")
        elif outcome.action is LinkAction.OVERWRITTEN:
            user_output(f"  {prefix}Overwritten: {outcome.name} ({outcome.message})")
        else:
            user_output(f"  {prefix}Installed: {outcome.name} -> {outcome.source}")
    user_output()
    verb = "would be installed" if summary.dry_run else "installed"
    user_output(
        f"Done. {summary.installed + summary.overwritten} skill(s) {verb}, "
        f"{summary.skipped + summary.drifted} skipped."
    )
    if summary.drifted:
        user_output(f"{summary.drifted} skill(s) left untouched because they drifted.")


def report_uninstall(summary: UninstallSummary, title: str) -> None:
    for name in summary.removed:
        user_output(f"  {'Would remove' if summary.dry_run else 'Removed'} {name}")
    user_output()
    if summary.count == 0:
        user_output(f"Nothing to remove - {title} is not installed at this location.")
    elif summary.dry_run:
        user_output(f"Dry run complete. {summary.count} item(s) would be removed.")
    else:
        user_output(f"Done. Removed {summary.count} file(s).")


def run(
    manifest: PluginManifest,
    target: DeploymentTarget,
    *,
    uninstall: bool,
    symlink: bool,
    force: bool,
    dry_run: bool,
) -> int:
    """Run one install or uninstall and return the exit code."""
    strategy: DeploymentStrategy
    if symlink:
        strategy = SymlinkStrategy(manifest, force=force, dry_run=dry_run)
    else:
        strategy = CopyStrategy(manifest)

    if uninstall:
        user_output(f"Uninstalling {manifest.title} from {target.description}...")
        report_uninstall(strategy.uninstall(target), manifest.title)
        return 0

    user_output(f"Installing {manifest.title} v{manifest.version} to {target.description}...")
    summary = strategy.install(target)
    if isinstance(summary, LinkSummary):
        report_links(summary)
        return 0 if summary.complete else EXIT_PARTIAL
    report_install(summary)
    return 0


@click.command(
    context_settings={"ignore_unknown_options": True, "allow_extra_args": True, "help_option_names": []},
    add_help_option=False,
)
@click.option("--global", "-g", "use_global", is_flag=True, help="Install to the global (home) root.")
@click.option("--local", "-l", "use_local", is_flag=True, help="Install to the project root.")
@click.option("--uninstall", "-u", is_flag=True, help="Remove installed files.")
@click.option("--version", "-v", "show_version", is_flag=True, help="Show installed and available versions.")
@click.option("--help", "-h", "show_help", is_flag=True, help="Show this help message.")
@click.option("--symlink", is_flag=True, help="Link skills instead of copying.")
@click.option("--force", is_flag=True, help="Overwrite drifted symlinks or files.")
@click.option("--dry-run", is_flag=True, help="Preview symlink changes.")
@click.option("--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(
    ctx: click.Context,
    use_global: bool,
    use_local: bool,
    uninstall: bool,
    show_version: bool,
    show_help: bool,
    symlink: bool,
    force: bool,
    dry_run: bool,
    verbose: bool,
) -> None:
    """Deploy commands and knowledge documents to ~/.claude or ./.claude."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    manifest = load_default_manifest()
    resolver = TargetResolver(manifest)

    for arg in ctx.args:
        user_output(f"Unknown option: {arg}")
        show_help = True

    if show_version:
        user_output(render_version(manifest, resolver))
        return

    if show_help:
        user_output(render_help(manifest))
        return

    if (dry_run or force) and not symlink:
        raise click.UsageError("--dry-run and --force only apply together with --symlink.")

    if use_global and use_local:
        raise click.UsageError("Choose either --global or --local, not both.")

    if use_local:
        mode = DeployMode.LOCAL
    elif use_global or uninstall:
        mode = DeployMode.GLOBAL
    else:
        mode = prompt_for_mode(manifest)

    target = resolver.resolve(mode)
    try:
        exit_code = run(
            manifest,
            target,
            uninstall=uninstall,
            symlink=symlink,
            force=force,
            dry_run=dry_run,
        )
    except ValidationFailedError as e:
        error_output(f"Error: {e.message}")
        error_output("Aborting: nothing was installed.")
        raise SystemExit(EXIT_ERROR) from e
    except DeployError as e:
        error_output(f"Error: {e.message}")
        raise SystemExit(EXIT_ERROR) from e

    if exit_code:
        raise SystemExit(exit_code)
