"""Artifact discovery and source validation.

Commands are declared in the manifest; knowledge files are discovered from the
source tree by convention (every *.md except the index file).

Per IMPLEMENTATION_PHILOSOPHY:
- Ruthless simplicity: Direct filesystem checks, no complex caching
- Validation collects every problem before reporting, never stops at the first
"""

import logging
import os
from pathlib import Path

from .exceptions import ValidationFailedError
from .schema import Artifact
from .schema import ArtifactCategory
from .schema import ArtifactSet
from .schema import PluginManifest

logger = logging.getLogger(__name__)


def discover_knowledge_files(manifest: PluginManifest) -> list[Path]:
    """
    Discover knowledge documents in the source tree.

    Convention:
    - knowledge/ directory → .md files directly inside (not recursive)
    - the index file (README.md) is documentation, not an artifact

    Args:
        manifest: Plugin manifest describing the source layout

    Returns:
        Knowledge file paths sorted by filename (empty if the directory is missing)
    """
    knowledge_dir = manifest.knowledge_source_dir
    if not knowledge_dir.is_dir():
        logger.debug(f"No knowledge directory at {knowledge_dir}")
        return []

    return sorted(
        (f for f in knowledge_dir.glob("*.md") if f.is_file() and f.name != manifest.index_file),
        key=lambda p: p.name,
    )


def _is_readable_file(path: Path) -> bool:
    return path.is_file() and os.access(path, os.R_OK)


def validate_sources(manifest: PluginManifest) -> ArtifactSet:
    """
    Confirm every artifact can be read before anything is written.

    Args:
        manifest: Plugin manifest declaring the commands

    Returns:
        ArtifactSet with commands (declared order) and knowledge (sorted)

    Raises:
        ValidationFailedError: Listing every missing or unreadable source file

    Example:
        >>> artifacts = validate_sources(manifest)
        >>> print(f"{len(artifacts.commands)} commands + {len(artifacts.knowledge)} knowledge files")
    """
    missing: list[Path] = []

    commands = []
    for spec in manifest.commands:
        source = manifest.command_source(spec.name)
        if not _is_readable_file(source):
            logger.debug(f"Missing command source: {source}")
            missing.append(source)
            continue
        commands.append(
            Artifact(
                name=spec.name,
                category=ArtifactCategory.COMMAND,
                source=source,
                description=spec.description,
            )
        )

    knowledge = []
    for source in discover_knowledge_files(manifest):
        if not os.access(source, os.R_OK):
            logger.debug(f"Unreadable knowledge source: {source}")
            missing.append(source)
            continue
        knowledge.append(Artifact(name=source.name, category=ArtifactCategory.KNOWLEDGE, source=source))

    if missing:
        raise ValidationFailedError(missing, source_root=manifest.source_root)

    logger.info(f"Validated {len(commands)} commands + {len(knowledge)} knowledge files")
    return ArtifactSet(commands=commands, knowledge=knowledge)
