"""Public resolver — unauthenticated, read-only permanent links.

Address shapes (segment order matters):

    /{owner}                                 main ledger, current master
    /{owner}/{versionNumber}                 main ledger, exact version
    /{owner}/v/{profileName}                 locked ledger, current master
    /{owner}/v/{profileName}/{versionNumber} locked ledger, exact version

Numbered links resolve to the same content forever; un-numbered links
float with the master.  Every successful resolution is handed to the
analytics recorder, whose failures never reach the caller.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from urllib.parse import unquote

from resumeledger.core.errors import BadRequestError, NotFoundError
from resumeledger.core.owner_registry import OwnerRegistry
from resumeledger.core.version_store import VersionStore
from resumeledger.models.analytics import ViewMetadata
from resumeledger.models.public import PublicAddress, ResolvedView
from resumeledger.models.versions import LedgerRef

if TYPE_CHECKING:
    from resumeledger.analytics.recorder import AnalyticsRecorder

logger = logging.getLogger(__name__)

LOCKED_SEGMENT = "v"

# Largest value SQLite can store in an INTEGER column.
MAX_VERSION_NUMBER = 2**63 - 1


def _parse_version_number(segment: str) -> int:
    if not (segment.isascii() and segment.isdigit()):
        raise BadRequestError("Invalid version number")
    number = int(segment)
    if not 1 <= number <= MAX_VERSION_NUMBER:
        raise BadRequestError("Invalid version number")
    return number


def parse_public_path(path: str) -> PublicAddress:
    """Parse one of the four public path shapes into a ``PublicAddress``.

    Raises
    ------
    BadRequestError
        A version segment is not a positive integer.
    NotFoundError
        The path matches none of the shapes.
    """
    segments = [unquote(s) for s in (path or "").strip().split("/") if s]

    if len(segments) == 1:
        return PublicAddress(username=segments[0])
    if len(segments) == 2:
        return PublicAddress(
            username=segments[0],
            version_number=_parse_version_number(segments[1]),
        )
    if len(segments) in (3, 4) and segments[1] == LOCKED_SEGMENT:
        version_number = (
            _parse_version_number(segments[3]) if len(segments) == 4 else None
        )
        return PublicAddress(
            username=segments[0],
            profile_name=segments[2],
            version_number=version_number,
        )
    raise NotFoundError("Resume not found")


class PublicResolver:
    """Maps public addresses to immutable snapshots.

    Parameters
    ----------
    owners:
        Username lookup.
    store:
        Version store to read snapshots from.
    recorder:
        Optional analytics collaborator notified of each successful view.
    """

    def __init__(
        self,
        owners: OwnerRegistry,
        store: VersionStore,
        recorder: AnalyticsRecorder | None = None,
    ) -> None:
        self._owners = owners
        self._store = store
        self._recorder = recorder

    def resolve(
        self, address: PublicAddress, metadata: ViewMetadata | None = None
    ) -> ResolvedView:
        """Resolve ``address`` to a full version, or raise ``NotFoundError``."""
        owner = self._owners.get_by_username(address.username)

        if address.profile_name is not None:
            ledger = LedgerRef.locked(owner.owner_id, address.profile_name)
        else:
            ledger = LedgerRef.main(owner.owner_id)

        if address.version_number is None:
            version = self._store.get_master(ledger)
        else:
            try:
                version = self._store.get_version(ledger, address.version_number)
            except NotFoundError:
                if address.profile_name is not None:
                    raise NotFoundError("Locked profile version not found") from None
                raise

        view = ResolvedView(address=address, version=version)
        logger.debug(
            "Resolved %s to version %d", address.to_path(), version.version_number
        )
        if self._recorder is not None:
            self._recorder.record_view(address, metadata)
        return view

    def resolve_path(
        self, path: str, metadata: ViewMetadata | None = None
    ) -> ResolvedView:
        """Parse and resolve a public path in one step."""
        return self.resolve(parse_public_path(path), metadata)
