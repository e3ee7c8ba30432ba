"""Target resolver - Resolve a deployment mode to destination paths.

CRITICAL (KERNEL_PHILOSOPHY): Home and project roots are app policy, not library mechanism.

Per AGENTS.md: Ruthless simplicity - pure path arithmetic, no filesystem access.
"""

import logging
from pathlib import Path

from .exceptions import InvalidModeError
from .schema import DeploymentTarget
from .schema import DeployMode
from .schema import PluginManifest

logger = logging.getLogger(__name__)

LEDGER_FILENAME = ".version"


class TargetResolver:
    """
    Resolve deployment modes to destination paths (with injected roots).

    Both modes share the same layout below their base:

        <base>/commands/<plugin>/          command documents
        <base>/<plugin>/knowledge/         knowledge documents
        <base>/<plugin>/.version           version ledger
        <base>/skills/<plugin>--<name>/    symlinked skills

    where <base> is <home>/<config_dir> (global) or <cwd>/<config_dir> (local).
    """

    def __init__(
        self,
        manifest: PluginManifest,
        home: Path | None = None,
        cwd: Path | None = None,
    ):
        """Initialize resolver with manifest and optional root overrides.

        Args:
            manifest: Plugin manifest (supplies plugin name and config dir)
            home: Home directory; defaults to Path.home() at resolve time
            cwd: Project directory; defaults to Path.cwd() at resolve time

        Example:
            >>> resolver = TargetResolver(manifest, home=Path("/tmp/home"))
            >>> resolver.resolve("global").command_root
            PosixPath('/tmp/home/.claude/commands/fca')
        """
        self.manifest = manifest
        self.home = home
        self.cwd = cwd

    def resolve(self, mode: DeployMode | str) -> DeploymentTarget:
        """
        Resolve a mode to its deployment target.

        Args:
            mode: DeployMode or its string value ("global" / "local")

        Returns:
            DeploymentTarget with command, knowledge, ledger and skills paths

        Raises:
            InvalidModeError: If mode is not one of the two known modes
        """
        try:
            mode = DeployMode(mode)
        except ValueError as e:
            raise InvalidModeError(
                f"Unknown deployment mode: {mode!r} (expected 'global' or 'local')",
                context={"mode": str(mode)},
            ) from e

        plugin = self.manifest.name
        config_dir = self.manifest.config_dir

        if mode is DeployMode.GLOBAL:
            root = self.home or Path.home()
            prefix = f"~/{config_dir}/{plugin}/knowledge"
            description = f"global (~/{config_dir}/)"
        else:
            root = self.cwd or Path.cwd()
            prefix = f"{config_dir}/{plugin}/knowledge"
            description = f"local ({config_dir}/)"

        base = root / config_dir
        knowledge_root = base / plugin / "knowledge"

        target = DeploymentTarget(
            mode=mode,
            base=base,
            command_root=base / "commands" / plugin,
            knowledge_root=knowledge_root,
            ledger_path=knowledge_root.parent / LEDGER_FILENAME,
            skills_root=base / "skills",
            addressing_prefix=prefix,
            description=description,
        )
        logger.debug(f"Resolved {mode.value} target: {base}")
        return target
