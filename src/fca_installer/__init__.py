"""fca-installer - Deploy command and knowledge documents to a global or project root.

Public API exports.

Per KERNEL_PHILOSOPHY: This is library mechanism, the CLI injects policy (mode, strategy).
"""

from .discovery import discover_knowledge_files
from .discovery import validate_sources
from .exceptions import DeployError
from .exceptions import DeployIOError
from .exceptions import InvalidModeError
from .exceptions import ValidationFailedError
from .installer import CopyStrategy
from .installer import InstallKind
from .installer import InstallSummary
from .installer import UninstallSummary
from .ledger import LedgerStatus
from .ledger import VersionLedger
from .protocols import DeploymentStrategy
from .resolver import TargetResolver
from .schema import Artifact
from .schema import ArtifactCategory
from .schema import ArtifactSet
from .schema import CommandSpec
from .schema import DeploymentTarget
from .schema import DeployMode
from .schema import PluginManifest
from .schema import load_default_manifest
from .symlink import LinkAction
from .symlink import LinkOutcome
from .symlink import LinkState
from .symlink import LinkSummary
from .symlink import SymlinkStrategy
from .transform import rewrite_references

__all__ = [
    # Configuration
    "PluginManifest",
    "CommandSpec",
    "load_default_manifest",
    # Models
    "Artifact",
    "ArtifactCategory",
    "ArtifactSet",
    "DeploymentTarget",
    "DeployMode",
    # Resolution
    "TargetResolver",
    # Discovery and validation
    "discover_knowledge_files",
    "validate_sources",
    # Transformation
    "rewrite_references",
    # Ledger
    "VersionLedger",
    "LedgerStatus",
    # Strategies
    "DeploymentStrategy",
    "CopyStrategy",
    "InstallKind",
    "InstallSummary",
    "UninstallSummary",
    "SymlinkStrategy",
    "LinkAction",
    "LinkOutcome",
    "LinkState",
    "LinkSummary",
    # Exceptions
    "DeployError",
    "DeployIOError",
    "InvalidModeError",
    "ValidationFailedError",
]

__version__ = "1.0.0"
