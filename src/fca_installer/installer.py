"""Copy-based deployment mechanism.

Per KERNEL_PHILOSOPHY: Mechanism not policy - the resolver decides WHERE,
the manifest decides WHAT, this module only moves bytes.

Per IMPLEMENTATION_PHILOSOPHY:
- Validate everything before touching the destination
- Ledger written last, so it never claims a version that was not fully copied
- Uninstall removes only names this tool deploys
"""

import logging
from enum import Enum

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

from .discovery import discover_knowledge_files
from .discovery import validate_sources
from .exceptions import DeployIOError
from .ledger import VersionLedger
from .schema import DeploymentTarget
from .schema import PluginManifest
from .transform import rewrite_references
from .utils import atomic_write_bytes
from .utils import atomic_write_text
from .utils import remove_dir_if_empty
from .utils import remove_file

logger = logging.getLogger(__name__)


class InstallKind(str, Enum):
    FRESH = "fresh"
    REINSTALL = "reinstall"
    UPGRADE = "upgrade"


class InstallSummary(BaseModel):
    """Result of a copy install (immutable data structure)."""

    model_config = ConfigDict(frozen=True)

    kind: InstallKind
    version: str
    previous_version: str | None = None
    target_description: str
    commands_written: list[str] = Field(default_factory=list)
    knowledge_written: list[str] = Field(default_factory=list)
    invocations: dict[str, str] = Field(default_factory=dict)

    @property
    def command_count(self) -> int:
        return len(self.commands_written)

    @property
    def knowledge_count(self) -> int:
        return len(self.knowledge_written)


class UninstallSummary(BaseModel):
    """Result of an uninstall; an empty list means nothing was deployed."""

    model_config = ConfigDict(frozen=True)

    removed: list[str] = Field(default_factory=list)
    dry_run: bool = False

    @property
    def count(self) -> int:
        return len(self.removed)


def classify_install(previous: str | None, version: str) -> InstallKind:
    """Classify a run from the ledger (informational only)."""
    if previous is None:
        return InstallKind.FRESH
    if previous == version:
        return InstallKind.REINSTALL
    return InstallKind.UPGRADE


def invocation_list(manifest: PluginManifest) -> dict[str, str]:
    """Map '/<plugin>:<command>' to its description, in declared order."""
    return {f"/{manifest.name}:{command.name}": command.description for command in manifest.commands}


class CopyStrategy:
    """
    Deploy rewritten command copies and verbatim knowledge copies.

    Layout at the target:
    - <command_root>/<name>.md       command documents, references rewritten
    - <knowledge_root>/<file>.md     knowledge documents, byte-for-byte
    - <knowledge_root>/../.version   version ledger
    """

    def __init__(self, manifest: PluginManifest):
        self.manifest = manifest

    def install(self, target: DeploymentTarget) -> InstallSummary:
        """
        Install every artifact to target.

        Process:
        1. Read ledger and classify the run (fresh, reinstall, upgrade)
        2. Validate sources (abort before any write)
        3. Rewrite and write command documents
        4. Copy knowledge documents
        5. Write ledger

        Args:
            target: Resolved deployment target

        Returns:
            InstallSummary describing what was written

        Raises:
            ValidationFailedError: If any source is missing (nothing written)
            DeployIOError: If a write fails (earlier writes stay, ledger untouched)
        """
        version = self.manifest.version
        ledger = VersionLedger(target.ledger_path)

        # Step 1: Classify
        previous = ledger.read()
        kind = classify_install(previous, version)
        if kind is InstallKind.REINSTALL:
            logger.info(f"v{version} already installed at {target.base}; reinstalling to ensure all files are current")
        elif kind is InstallKind.UPGRADE:
            logger.info(f"Updating {target.base}: v{previous} -> v{version}")
        else:
            logger.info(f"Installing v{version} to {target.base}")

        # Step 2: Validate (transactional precondition)
        artifacts = validate_sources(self.manifest)

        # Step 3: Commands
        commands_written = []
        for artifact in artifacts.commands:
            destination = target.command_destination(artifact)
            text = _read_text(artifact.source)
            atomic_write_text(
                destination,
                rewrite_references(text, target.addressing_prefix, self.manifest.reference_marker),
            )
            logger.debug(f"Wrote command {destination}")
            commands_written.append(artifact.filename)

        # Step 4: Knowledge
        knowledge_written = []
        for artifact in artifacts.knowledge:
            destination = target.knowledge_destination(artifact)
            _copy_file(artifact.source, destination)
            logger.debug(f"Copied knowledge {destination}")
            knowledge_written.append(artifact.filename)

        # Step 5: Ledger (last)
        ledger.write(version)

        logger.info(
            f"Installed {len(commands_written)} commands + {len(knowledge_written)} knowledge files "
            f"(v{version}, {target.description})"
        )
        return InstallSummary(
            kind=kind,
            version=version,
            previous_version=previous,
            target_description=target.description,
            commands_written=commands_written,
            knowledge_written=knowledge_written,
            invocations=invocation_list(self.manifest),
        )

    def uninstall(self, target: DeploymentTarget) -> UninstallSummary:
        """
        Remove deployed copies and the ledger from target.

        Process:
        1. Remove declared command files, then command_root if empty
        2. Remove ledger
        3. Remove known knowledge files, then knowledge_root if empty,
           then its parent only if now empty

        Args:
            target: Resolved deployment target

        Returns:
            UninstallSummary (count 0 means nothing was installed here)

        Raises:
            DeployIOError: If a removal fails
        """
        logger.info(f"Uninstalling from {target.base}")
        removed = []

        # Step 1: Commands
        if target.command_root.is_dir():
            for name in self.manifest.command_names:
                path = target.command_root / f"{name}.md"
                if remove_file(path):
                    logger.debug(f"Removed command {path}")
                    removed.append(f"command: {path.name}")
            remove_dir_if_empty(target.command_root)

        # Step 2: Ledger
        VersionLedger(target.ledger_path).delete()

        # Step 3: Knowledge
        if target.knowledge_root.is_dir():
            for source in discover_knowledge_files(self.manifest):
                path = target.knowledge_root / source.name
                if remove_file(path):
                    logger.debug(f"Removed knowledge {path}")
                    removed.append(f"knowledge: {path.name}")
            if remove_dir_if_empty(target.knowledge_root):
                remove_dir_if_empty(target.knowledge_root.parent)
        else:
            remove_dir_if_empty(target.knowledge_root.parent)

        logger.info(f"Removed {len(removed)} file(s) from {target.base}")
        return UninstallSummary(removed=removed)


def _read_text(path):
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise DeployIOError(f"Failed to read {path}: {e}", path=path) from e


def _copy_file(source, destination):
    try:
        data = source.read_bytes()
    except OSError as e:
        raise DeployIOError(f"Failed to read {source}: {e}", path=source) from e
    atomic_write_bytes(destination, data)
