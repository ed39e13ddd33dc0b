"""Public address models — the four permanent-link shapes."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from resumeledger.models.versions import LedgerKind, Version


class PublicAddress(BaseModel):
    """A parsed public path.

    ``version_number`` None means "floating": resolve to the current master.
    A numbered address always resolves to the same content.
    """

    model_config = ConfigDict(frozen=True)

    username: str
    profile_name: str | None = None
    version_number: int | None = Field(default=None, gt=0)

    @property
    def kind(self) -> LedgerKind:
        return LedgerKind.LOCKED if self.profile_name is not None else LedgerKind.MASTER

    @property
    def is_floating(self) -> bool:
        return self.version_number is None

    def to_path(self) -> str:
        parts = [self.username]
        if self.profile_name is not None:
            parts += ["v", self.profile_name]
        if self.version_number is not None:
            parts.append(str(self.version_number))
        return "/" + "/".join(parts)


class ResolvedView(BaseModel):
    """The snapshot a public address resolved to."""

    model_config = ConfigDict(frozen=True)

    address: PublicAddress
    version: Version
