"""Core ledger components: storage, versions, master resolution, profiles."""

from resumeledger.core.archival_gate import ArchivalGate
from resumeledger.core.database import Database
from resumeledger.core.errors import (
    AlreadyLiveError,
    BadRequestError,
    ConflictError,
    ForbiddenError,
    InternalError,
    LedgerIntegrityError,
    NotFoundError,
    ResumeLedgerError,
    TransactionTimeoutError,
    describe_error,
)
from resumeledger.core.locked_profiles import LockedProfileManager
from resumeledger.core.master_resolution import MasterResolution
from resumeledger.core.owner_registry import OwnerRegistry
from resumeledger.core.public_resolver import PublicResolver, parse_public_path
from resumeledger.core.version_store import VersionStore

__all__ = [
    "AlreadyLiveError",
    "ArchivalGate",
    "BadRequestError",
    "ConflictError",
    "Database",
    "ForbiddenError",
    "InternalError",
    "LedgerIntegrityError",
    "LockedProfileManager",
    "MasterResolution",
    "NotFoundError",
    "OwnerRegistry",
    "PublicResolver",
    "ResumeLedgerError",
    "TransactionTimeoutError",
    "VersionStore",
    "describe_error",
    "parse_public_path",
]
