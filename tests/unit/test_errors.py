"""Tests for the error taxonomy and public message mapping."""

from __future__ import annotations

import pytest

from resumeledger.core.errors import (
    INTERNAL_MESSAGE,
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


class TestTaxonomy:
    @pytest.mark.parametrize(
        ("exc", "code"),
        [
            (NotFoundError(), "not_found"),
            (ForbiddenError(), "forbidden"),
            (ConflictError(), "conflict"),
            (BadRequestError(), "bad_request"),
            (AlreadyLiveError(), "bad_request"),
        ],
    )
    def test_codes_are_distinct(self, exc, code):
        assert describe_error(exc)[0] == code

    def test_custom_message_is_public(self):
        assert describe_error(NotFoundError("Locked profile not found")) == (
            "not_found",
            "Locked profile not found",
        )

    def test_default_messages(self):
        assert NotFoundError().public_message == "Resume not found"
        assert AlreadyLiveError().public_message == "This version is already live"

    def test_conflict_retryable_flag(self):
        assert ConflictError().retryable is False
        assert ConflictError("busy", retryable=True).retryable is True

    def test_all_share_a_base(self):
        for cls in (NotFoundError, ForbiddenError, ConflictError, InternalError):
            assert issubclass(cls, ResumeLedgerError)


class TestInternalErrors:
    @pytest.mark.parametrize(
        "exc",
        [
            InternalError("disk full at /var/db"),
            TransactionTimeoutError("Transaction exceeded 50s"),
            LedgerIntegrityError("Tampered version abc"),
            ValueError("unexpected"),
        ],
    )
    def test_detail_never_leaks(self, exc):
        code, message = describe_error(exc)
        assert code == "internal"
        assert message == INTERNAL_MESSAGE

    def test_internal_detail_kept_for_logs(self):
        exc = InternalError("disk full at /var/db")
        assert "disk full" in str(exc)
        assert exc.public_message == INTERNAL_MESSAGE

    def test_timeout_is_retryable(self):
        assert TransactionTimeoutError.retryable is True
        assert InternalError.retryable is False
