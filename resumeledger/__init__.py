"""resumeledger: immutable, versioned resume hosting with permanent links.

- Append-only version ledgers, one main ledger per owner
- Exactly one live (master) version per ledger, retargeted atomically
- Locked profiles: named forks of the master, refreshed on demand
- Public resolver for floating and numbered permanent links
- Archival as a visibility toggle that never removes the live version
"""

__version__ = "0.1.0"
__description__ = "Immutable, versioned resume hosting with permanent public links"

from resumeledger.core.service import ResumeService
from resumeledger.cli.app import app as cli

__all__ = ["ResumeService", "cli", "__version__"]
