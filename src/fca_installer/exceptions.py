"""Deployment-specific exceptions.

Per IMPLEMENTATION_PHILOSOPHY: Clear, actionable error messages.
"""

from pathlib import Path


class DeployError(Exception):
    """Base exception for deployment operations."""

    def __init__(self, message: str, context: dict | None = None):
        """Initialize with message and optional context.

        Args:
            message: Human-readable error message
            context: Optional dict with additional context (file paths, etc.)
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}


class ValidationFailedError(DeployError):
    """One or more source artifacts are missing or unreadable.

    Carries every offending path, never just the first one.
    """

    def __init__(self, missing: list[Path], source_root: Path | None = None):
        self.missing = list(missing)
        lines = [f"  - {path}" for path in self.missing]
        super().__init__(
            f"{len(self.missing)} source file(s) missing or unreadable:\n" + "\n".join(lines),
            context={"missing": [str(p) for p in self.missing], "source_root": str(source_root)},
        )


class InvalidModeError(DeployError):
    """Target mode is neither 'global' nor 'local'."""


class DeployIOError(DeployError):
    """Filesystem operation failed while writing, copying or deleting."""

    def __init__(self, message: str, path: Path):
        super().__init__(message, context={"path": str(path)})
        self.path = path
