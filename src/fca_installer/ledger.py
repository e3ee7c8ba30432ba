"""Version ledger management.

Tracks which package version is deployed at a target.

Per KERNEL_PHILOSOPHY:
- "Could two teams want different behavior?" → YES (ledger location is policy)
- This is library mechanism - the resolver injects the ledger path

Per IMPLEMENTATION_PHILOSOPHY:
- Ruthless simplicity: The file holds the version string and nothing else
- Reads are soft: absent and unreadable both mean "not installed"
"""

import logging
from enum import Enum
from pathlib import Path

from .utils import atomic_write_text
from .utils import remove_file

logger = logging.getLogger(__name__)


class LedgerStatus(str, Enum):
    NOT_INSTALLED = "not installed"
    UP_TO_DATE = "up to date"
    OUTDATED = "update available"


class VersionLedger:
    """
    Version marker file manager (with injected ledger path).

    Ledger format: the version string as the sole file content, e.g.

        1.2.0
    """

    def __init__(self, ledger_path: Path):
        """Initialize ledger with resolver-provided path.

        Args:
            ledger_path: Path to the marker file (the resolver determines location)

        Example:
            >>> ledger = VersionLedger(ledger_path=Path.home() / ".claude" / "fca" / ".version")
        """
        self.ledger_path = ledger_path

    def read(self) -> str | None:
        """
        Read the deployed version.

        Returns:
            Version string, or None if the ledger is absent or unreadable
        """
        try:
            version = self.ledger_path.read_text(encoding="utf-8").strip()
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"No readable ledger at {self.ledger_path}: {e}")
            return None
        return version or None

    def write(self, version: str) -> None:
        """
        Record version as deployed, replacing any previous value.

        Args:
            version: Package version string

        Raises:
            DeployIOError: If the ledger cannot be written
        """
        atomic_write_text(self.ledger_path, version)
        logger.debug(f"Wrote ledger {self.ledger_path}: {version}")

    def delete(self) -> bool:
        """
        Remove the ledger. Absence is not an error.

        Returns:
            True if a ledger file was removed
        """
        removed = remove_file(self.ledger_path)
        if removed:
            logger.debug(f"Removed ledger {self.ledger_path}")
        return removed

    def status(self, package_version: str) -> LedgerStatus:
        """
        Compare the deployed version with the package version.

        Args:
            package_version: Version this package would deploy

        Returns:
            LedgerStatus for display
        """
        installed = self.read()
        if installed is None:
            return LedgerStatus.NOT_INSTALLED
        if installed == package_version:
            return LedgerStatus.UP_TO_DATE
        return LedgerStatus.OUTDATED
