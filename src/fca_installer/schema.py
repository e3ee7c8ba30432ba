"""Plugin manifest and deployment models - Parse plugin.toml files.

Per KERNEL_PHILOSOPHY: The artifact set is policy, injected as an immutable manifest.
Per AGENTS.md: Ruthless simplicity - use standard library (tomllib), minimal fields.
"""

import tomllib
from enum import Enum
from pathlib import Path

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field


class DeployMode(str, Enum):
    """Well-known deployment roots."""

    GLOBAL = "global"
    LOCAL = "local"


class ArtifactCategory(str, Enum):
    COMMAND = "command"
    KNOWLEDGE = "knowledge"


class CommandSpec(BaseModel):
    """Declared command: name plus the description shown to users."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""


class PluginManifest(BaseModel):
    """
    Plugin manifest from plugin.toml.

    Declares the command artifacts once and describes where sources live.
    Knowledge artifacts are not declared; they are discovered at install time.
    """

    model_config = ConfigDict(frozen=True)

    # From [plugin] section
    name: str
    version: str
    display_name: str = ""
    config_dir: str = ".claude"

    # From [plugin.layout] section (our convention)
    knowledge_dir: str = "knowledge"
    skills_dir: str = "skills"
    skill_file: str = "SKILL.md"
    index_file: str = "README.md"
    reference_marker: str = "@knowledge/"

    # From [[commands]] array (declared order is preserved)
    commands: list[CommandSpec] = Field(default_factory=list)

    # Directory holding skills/ and knowledge/
    source_root: Path

    @property
    def title(self) -> str:
        return self.display_name or self.name

    @property
    def command_names(self) -> list[str]:
        return [command.name for command in self.commands]

    def command_source(self, name: str) -> Path:
        """Source path of a declared command document."""
        return self.source_root / self.skills_dir / name / self.skill_file

    @property
    def knowledge_source_dir(self) -> Path:
        return self.source_root / self.knowledge_dir

    @classmethod
    def from_toml(cls, manifest_path: Path, source_root: Path | None = None) -> "PluginManifest":
        """
        Load plugin manifest from plugin.toml.

        Args:
            manifest_path: Path to plugin.toml file
            source_root: Source tree root (defaults to the manifest's directory)

        Returns:
            PluginManifest instance

        Raises:
            FileNotFoundError: If plugin.toml doesn't exist
            KeyError: If required fields missing
            tomllib.TOMLDecodeError: If invalid TOML
        """
        if not manifest_path.exists():
            raise FileNotFoundError(f"plugin.toml not found: {manifest_path}")

        with open(manifest_path, "rb") as f:
            data = tomllib.load(f)

        # Extract [plugin] section (required)
        plugin = data.get("plugin", {})
        if not plugin:
            raise KeyError(f"[plugin] section missing in {manifest_path}")

        layout = plugin.get("layout", {})
        commands = [CommandSpec(**entry) for entry in data.get("commands", [])]

        return cls(
            # Required from [plugin]
            name=plugin["name"],
            version=plugin["version"],
            display_name=plugin.get("display_name", ""),
            config_dir=plugin.get("config_dir", ".claude"),
            # Optional from [plugin.layout]
            **layout,
            commands=commands,
            source_root=source_root or manifest_path.parent,
        )


class Artifact(BaseModel):
    """A single deployable document."""

    model_config = ConfigDict(frozen=True)

    name: str
    category: ArtifactCategory
    source: Path
    description: str = ""

    @property
    def filename(self) -> str:
        """Filename used at the destination."""
        if self.category is ArtifactCategory.COMMAND:
            return f"{self.name}.md"
        return self.name


class ArtifactSet(BaseModel):
    """Validated artifacts for one run (immutable data structure)."""

    model_config = ConfigDict(frozen=True)

    commands: list[Artifact] = Field(default_factory=list)
    knowledge: list[Artifact] = Field(default_factory=list)


class DeploymentTarget(BaseModel):
    """Resolved destination paths for one deployment mode."""

    model_config = ConfigDict(frozen=True)

    mode: DeployMode
    base: Path
    command_root: Path
    knowledge_root: Path
    ledger_path: Path
    skills_root: Path
    addressing_prefix: str
    description: str

    def command_destination(self, artifact: Artifact) -> Path:
        return self.command_root / artifact.filename

    def knowledge_destination(self, artifact: Artifact) -> Path:
        return self.knowledge_root / artifact.filename


DEFAULT_MANIFEST_PATH = Path(__file__).parent / "data" / "plugin.toml"


def load_default_manifest() -> PluginManifest:
    """Load the manifest bundled with this package."""
    return PluginManifest.from_toml(DEFAULT_MANIFEST_PATH)
