"""Protocols for deployment strategies.

Per KERNEL_PHILOSOPHY: Protocol-based extensibility over configuration.
Per IMPLEMENTATION_PHILOSOPHY: Composition over inheritance.
"""

from typing import Protocol
from typing import runtime_checkable

from .schema import DeploymentTarget


@runtime_checkable
class DeploymentStrategy(Protocol):
    """Protocol for deploying the artifact set to a resolved target.

    Implementations:
    - CopyStrategy: rewritten copies plus a version ledger
    - SymlinkStrategy: per-skill symlinks back into the source tree

    Both receive a fully resolved target; neither prompts the user.
    """

    def install(self, target: DeploymentTarget):
        """Deploy every artifact to target.

        Raises:
            ValidationFailedError: If any source artifact is missing (nothing written)
            DeployIOError: If a filesystem operation fails
        """
        ...

    def uninstall(self, target: DeploymentTarget):
        """Remove previously deployed artifacts from target.

        Raises:
            DeployIOError: If a filesystem operation fails
        """
        ...
