"""Tests for the copy installer and uninstaller."""

import os

import pytest
from conftest import make_manifest
from conftest import snapshot
from fca_installer import CopyStrategy
from fca_installer import DeployIOError
from fca_installer import DeploymentStrategy
from fca_installer import InstallKind
from fca_installer import TargetResolver
from fca_installer import ValidationFailedError
from fca_installer import VersionLedger


def test_strategy_satisfies_protocol(manifest):
    assert isinstance(CopyStrategy(manifest), DeploymentStrategy)


def test_global_install_scenario(manifest, resolver, home):
    """Two commands and two knowledge files land in the global layout with a ledger."""
    target = resolver.resolve("global")

    summary = CopyStrategy(manifest).install(target)

    assert (home / "cfg" / "commands" / "plugin" / "a.md").is_file()
    assert (home / "cfg" / "commands" / "plugin" / "b.md").is_file()
    assert (home / "cfg" / "plugin" / "knowledge" / "x.md").read_text() == "# X\n"
    assert (home / "cfg" / "plugin" / "knowledge" / "y.md").read_text() == "# Y\n"
    assert not (home / "cfg" / "plugin" / "knowledge" / "README.md").exists()
    assert (home / "cfg" / "plugin" / ".version").read_text() == "2.1.0"

    assert summary.kind is InstallKind.FRESH
    assert summary.previous_version is None
    assert summary.version == "2.1.0"
    assert summary.command_count == 2
    assert summary.knowledge_count == 2
    assert summary.commands_written == ["a.md", "b.md"]
    assert summary.target_description == "global (~/cfg/)"
    assert summary.invocations == {"/plugin:a": "Command a", "/plugin:b": "Command b"}


def test_global_install_rewrites_to_home_prefix(manifest, resolver, home):
    CopyStrategy(manifest).install(resolver.resolve("global"))

    text = (home / "cfg" / "commands" / "plugin" / "a.md").read_text()
    assert text == "# A\n\nRead @~/cfg/plugin/knowledge/x.md first.\n"


def test_local_install_rewrites_every_marker(source_root, project):
    """Three markers become three local references and no bare marker remains."""
    (source_root / "skills" / "a" / "SKILL.md").write_text(
        "@knowledge/foo.md\n@knowledge/foo.md\n`@knowledge/foo.md`\n"
    )
    manifest = make_manifest(source_root)
    target = TargetResolver(manifest, cwd=project).resolve("local")

    CopyStrategy(manifest).install(target)

    text = (project / "cfg" / "commands" / "plugin" / "a.md").read_text()
    assert text.count("@cfg/plugin/knowledge/foo.md") == 3
    assert "@knowledge/" not in text


def test_install_is_idempotent(manifest, resolver, home):
    """A second run yields the identical tree and ledger."""
    strategy = CopyStrategy(manifest)
    target = resolver.resolve("global")

    strategy.install(target)
    first = snapshot(home)
    summary = strategy.install(target)

    assert snapshot(home) == first
    assert summary.kind is InstallKind.REINSTALL
    assert summary.previous_version == "2.1.0"


def test_install_classifies_upgrade(manifest, resolver):
    target = resolver.resolve("global")
    VersionLedger(target.ledger_path).write("1.0.0")

    summary = CopyStrategy(manifest).install(target)

    assert summary.kind is InstallKind.UPGRADE
    assert summary.previous_version == "1.0.0"
    assert VersionLedger(target.ledger_path).read() == "2.1.0"


@pytest.mark.parametrize("removed", ["a", "b"])
def test_missing_command_blocks_entire_install(manifest, resolver, source_root, home, removed):
    """Deleting any one declared source writes nothing and creates no ledger."""
    (source_root / "skills" / removed / "SKILL.md").unlink()
    target = resolver.resolve("global")

    with pytest.raises(ValidationFailedError):
        CopyStrategy(manifest).install(target)

    assert list(home.iterdir()) == []
    assert VersionLedger(target.ledger_path).read() is None


def test_write_failure_surfaces_path_and_skips_ledger(manifest, resolver):
    """An I/O error aborts the run before the ledger is written."""
    target = resolver.resolve("global")
    target.command_root.parent.mkdir(parents=True)
    target.command_root.write_text("in the way")

    with pytest.raises(DeployIOError) as exc_info:
        CopyStrategy(manifest).install(target)

    assert exc_info.value.path == target.command_root / "a.md"
    assert not target.ledger_path.exists()


def test_knowledge_copy_replaces_file_instead_of_writing_through(manifest, resolver, tmp_path):
    """A stale symlink at a knowledge destination is replaced, its target left intact."""
    target = resolver.resolve("global")
    outside = tmp_path / "outside.md"
    outside.write_text("not yours")
    destination = target.knowledge_root / "x.md"
    destination.parent.mkdir(parents=True)
    os.symlink(outside, destination)

    CopyStrategy(manifest).install(target)

    assert not destination.is_symlink()
    assert destination.read_bytes() == b"# X\n"
    assert outside.read_text() == "not yours"
    assert sorted(p.name for p in target.knowledge_root.iterdir()) == ["x.md", "y.md"]


def test_install_then_uninstall_round_trip(manifest, resolver, home):
    """Uninstall removes every deployed file, the ledger, and the owned directories."""
    strategy = CopyStrategy(manifest)
    target = resolver.resolve("global")
    strategy.install(target)

    summary = strategy.uninstall(target)

    assert summary.count == 4
    assert "command: a.md" in summary.removed
    assert "knowledge: y.md" in summary.removed
    assert not target.command_root.exists()
    assert not target.knowledge_root.exists()
    assert not target.knowledge_root.parent.exists()
    assert VersionLedger(target.ledger_path).read() is None
    assert snapshot(home) == {}


def test_uninstall_when_nothing_installed(manifest, resolver):
    """Zero removals is a normal outcome."""
    summary = CopyStrategy(manifest).uninstall(resolver.resolve("local"))

    assert summary.count == 0
    assert summary.removed == []


def test_uninstall_keeps_parent_with_unrelated_files(manifest, resolver):
    """The knowledge root's parent survives when it still holds user files."""
    strategy = CopyStrategy(manifest)
    target = resolver.resolve("global")
    strategy.install(target)
    user_file = target.knowledge_root.parent / "notes.txt"
    user_file.write_text("mine")

    strategy.uninstall(target)

    assert not target.knowledge_root.exists()
    assert not target.ledger_path.exists()
    assert user_file.read_text() == "mine"


def test_uninstall_only_removes_deployed_names(manifest, resolver):
    """Files this tool did not create are left behind, with their directories."""
    strategy = CopyStrategy(manifest)
    target = resolver.resolve("global")
    strategy.install(target)
    extra_command = target.command_root / "custom.md"
    extra_knowledge = target.knowledge_root / "mine.md"
    extra_command.write_text("user")
    extra_knowledge.write_text("user")

    summary = strategy.uninstall(target)

    assert summary.count == 4
    assert extra_command.read_text() == "user"
    assert extra_knowledge.read_text() == "user"
    assert not (target.command_root / "a.md").exists()


def test_targets_are_independent(manifest, resolver):
    """Installing globally leaves the local target untouched."""
    strategy = CopyStrategy(manifest)
    strategy.install(resolver.resolve("global"))

    local = resolver.resolve("local")
    assert VersionLedger(local.ledger_path).read() is None
    assert strategy.uninstall(local).count == 0
    assert VersionLedger(resolver.resolve("global").ledger_path).read() == "2.1.0"
