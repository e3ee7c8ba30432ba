"""Symlink-based deployment mechanism (alternative to copying).

Each command is linked as <skills_root>/<plugin>--<name>/SKILL.md pointing back
at its source file, so edits to the source tree show up without reinstalling.

Per IMPLEMENTATION_PHILOSOPHY:
- Idempotent: a correct link is left alone
- Non-destructive: drifted links and regular files are only replaced with force
- Uninstall removes symlinks only, never regular files
"""

import logging
import os
from enum import Enum
from pathlib import Path

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

from .discovery import validate_sources
from .exceptions import DeployIOError
from .installer import UninstallSummary
from .installer import invocation_list
from .schema import Artifact
from .schema import DeploymentTarget
from .schema import PluginManifest
from .utils import remove_dir_if_empty
from .utils import remove_file

logger = logging.getLogger(__name__)


class LinkState(str, Enum):
    """What currently occupies a symlink destination."""

    ABSENT = "absent"
    CORRECT = "correct"
    DRIFTED = "drifted"
    OCCUPIED = "occupied"


class LinkAction(str, Enum):
    INSTALLED = "installed"
    SKIPPED = "skipped"
    DRIFTED = "drifted"
    OVERWRITTEN = "overwritten"


class LinkOutcome(BaseModel):
    """Per-artifact result of a link attempt."""

    model_config = ConfigDict(frozen=True)

    name: str
    action: LinkAction
    state: LinkState
    destination: Path
    source: Path
    current_target: Path | None = None
    message: str = ""


class LinkSummary(BaseModel):
    """Result of a symlink install."""

    model_config = ConfigDict(frozen=True)

    outcomes: list[LinkOutcome] = Field(default_factory=list)
    dry_run: bool = False
    invocations: dict[str, str] = Field(default_factory=dict)

    def _count(self, action: LinkAction) -> int:
        return sum(1 for outcome in self.outcomes if outcome.action is action)

    @property
    def installed(self) -> int:
        return self._count(LinkAction.INSTALLED)

    @property
    def skipped(self) -> int:
        return self._count(LinkAction.SKIPPED)

    @property
    def drifted(self) -> int:
        return self._count(LinkAction.DRIFTED)

    @property
    def overwritten(self) -> int:
        return self._count(LinkAction.OVERWRITTEN)

    @property
    def complete(self) -> bool:
        """False when any artifact was left drifted."""
        return self.drifted == 0


def classify_link(destination: Path, expected: Path) -> tuple[LinkState, Path | None]:
    """Classify what sits at destination.

    Returns:
        (state, current link target or None)
    """
    if destination.is_symlink():
        current = destination.readlink()
        if current == expected:
            return LinkState.CORRECT, current
        return LinkState.DRIFTED, current
    if destination.exists():
        return LinkState.OCCUPIED, None
    return LinkState.ABSENT, None


class SymlinkStrategy:
    """
    Deploy commands as symlinks into the target's skills directory.

    Args:
        manifest: Plugin manifest
        force: Replace drifted links and regular files at destinations
        dry_run: Perform every check but change nothing
    """

    def __init__(self, manifest: PluginManifest, force: bool = False, dry_run: bool = False):
        self.manifest = manifest
        self.force = force
        self.dry_run = dry_run

    def destination(self, target: DeploymentTarget, name: str) -> Path:
        return target.skills_root / f"{self.manifest.name}--{name}" / self.manifest.skill_file

    def link(self, artifact: Artifact, target: DeploymentTarget) -> LinkOutcome:
        """
        Link one command artifact.

        Args:
            artifact: Validated command artifact
            target: Resolved deployment target

        Returns:
            LinkOutcome (INSTALLED, SKIPPED, DRIFTED or OVERWRITTEN)

        Raises:
            DeployIOError: If a link or directory cannot be created or removed
        """
        source = artifact.source.absolute()
        destination = self.destination(target, artifact.name)
        state, current = classify_link(destination, source)
        outcome = {"name": artifact.name, "state": state, "destination": destination, "source": source}

        if state is LinkState.CORRECT:
            logger.debug(f"Symlink already correct: {destination}")
            return LinkOutcome(action=LinkAction.SKIPPED, current_target=current, message="already correct", **outcome)

        if state in (LinkState.DRIFTED, LinkState.OCCUPIED):
            found = f"points to {current}" if state is LinkState.DRIFTED else "exists as a regular file"
            if not self.force:
                logger.info(f"Leaving drifted {destination} ({found}; expected {source})")
                return LinkOutcome(
                    action=LinkAction.DRIFTED,
                    current_target=current,
                    message=f"{found}, expected {source}",
                    **outcome,
                )
            if not self.dry_run:
                remove_file(destination)
                self._symlink(destination, source)
            logger.info(f"Overwrote {destination} (was: {found})")
            return LinkOutcome(action=LinkAction.OVERWRITTEN, current_target=current, message=f"was: {found}", **outcome)

        if not self.dry_run:
            self._symlink(destination, source)
        logger.debug(f"Linked {destination} -> {source}")
        return LinkOutcome(action=LinkAction.INSTALLED, **outcome)

    def install(self, target: DeploymentTarget) -> LinkSummary:
        """
        Link every declared command into target.

        Raises:
            ValidationFailedError: If any source is missing (nothing linked)
            DeployIOError: If a filesystem operation fails
        """
        artifacts = validate_sources(self.manifest)
        outcomes = [self.link(artifact, target) for artifact in artifacts.commands]
        summary = LinkSummary(
            outcomes=outcomes,
            dry_run=self.dry_run,
            invocations=invocation_list(self.manifest),
        )
        logger.info(
            f"Symlink install: {summary.installed} installed, {summary.overwritten} overwritten, "
            f"{summary.skipped} skipped, {summary.drifted} drifted"
        )
        return summary

    def uninstall(self, target: DeploymentTarget) -> UninstallSummary:
        """
        Remove command symlinks from target.

        Regular files found at a destination are left in place.

        Returns:
            UninstallSummary listing removed (or, in dry run, removable) links
        """
        removed = []
        for name in self.manifest.command_names:
            destination = self.destination(target, name)
            if destination.is_symlink():
                if not self.dry_run:
                    remove_file(destination)
                    remove_dir_if_empty(destination.parent)
                logger.debug(f"Removed symlink {destination}")
                removed.append(name)
            elif destination.exists():
                logger.warning(f"{destination} is a regular file, not a symlink; leaving it in place")
            elif not self.dry_run:
                remove_dir_if_empty(destination.parent)

        if not self.dry_run:
            remove_dir_if_empty(target.skills_root)
        return UninstallSummary(removed=removed, dry_run=self.dry_run)

    def _symlink(self, destination: Path, source: Path) -> None:
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            os.symlink(source, destination)
        except OSError as e:
            raise DeployIOError(f"Failed to link {destination} -> {source}: {e}", path=destination) from e
