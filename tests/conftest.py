"""Shared fixtures: a small fake source tree and isolated home/project roots."""

from pathlib import Path

import pytest
from fca_installer import CommandSpec
from fca_installer import PluginManifest
from fca_installer import TargetResolver

COMMAND_TEXT = {
    "a": "# A\n\nRead @knowledge/x.md first.\n",
    "b": "# B\n\nSee @knowledge/y.md and @knowledge/x.md.\n",
}
KNOWLEDGE_TEXT = {
    "x.md": "# X\n",
    "y.md": "# Y\n",
}


def make_source_tree(root: Path, commands: dict[str, str] = COMMAND_TEXT, knowledge: dict[str, str] = KNOWLEDGE_TEXT):
    """Create skills/<name>/SKILL.md, knowledge/*.md and a README index under root."""
    for name, text in commands.items():
        skill_dir = root / "skills" / name
        skill_dir.mkdir(parents=True, exist_ok=True)
        (skill_dir / "SKILL.md").write_text(text)

    knowledge_dir = root / "knowledge"
    knowledge_dir.mkdir(parents=True, exist_ok=True)
    (knowledge_dir / "README.md").write_text("# Index\n")
    for filename, text in knowledge.items():
        (knowledge_dir / filename).write_text(text)


def make_manifest(source_root: Path, names=("a", "b"), version: str = "2.1.0") -> PluginManifest:
    return PluginManifest(
        name="plugin",
        display_name="Test Plugin",
        version=version,
        config_dir="cfg",
        commands=[CommandSpec(name=name, description=f"Command {name}") for name in names],
        source_root=source_root,
    )


@pytest.fixture
def source_root(tmp_path):
    root = tmp_path / "source"
    make_source_tree(root)
    return root


@pytest.fixture
def manifest(source_root):
    return make_manifest(source_root)


@pytest.fixture
def home(tmp_path):
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def project(tmp_path):
    path = tmp_path / "project"
    path.mkdir()
    return path


@pytest.fixture
def resolver(manifest, home, project):
    return TargetResolver(manifest, home=home, cwd=project)


def snapshot(root: Path) -> dict[str, bytes]:
    """Map relative path to bytes for every file under root."""
    return {str(p.relative_to(root)): p.read_bytes() for p in sorted(root.rglob("*")) if p.is_file()}
