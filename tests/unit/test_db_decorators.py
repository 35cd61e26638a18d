"""Tests for database decorators."""

import pytest
from sqlalchemy.exc import OperationalError

from affiliate_ledger.utils.db_decorators import with_auto_commit
from affiliate_ledger.utils.exceptions import MUST_LOG, LedgerWriteError


class _Holder:
    def __init__(self, session) -> None:
        self.session = session


class TestWithAutoCommit:
    """Tests for with_auto_commit."""

    @pytest.mark.asyncio
    async def test_commits_on_success(self, mock_session) -> None:
        """Test commit after successful call on a session holder."""
        @with_auto_commit
        async def operation(holder):
            return 42

        assert await operation(_Holder(mock_session)) == 42
        mock_session.commit.assert_awaited_once()
        mock_session.rollback.assert_not_called()

    @pytest.mark.asyncio
    async def test_rolls_back_and_reraises(self, mock_session) -> None:
        """Test rollback and propagation on error."""
        @with_auto_commit
        async def operation(session):
            raise ValueError("boom")

        with pytest.raises(ValueError):
            await operation(session=mock_session)

        mock_session.rollback.assert_awaited_once()
        mock_session.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_without_session_runs_plainly(self) -> None:
        """Test calls without a session are passed through."""
        @with_auto_commit
        async def operation(value):
            return value * 2

        assert await operation(21) == 42


class TestExceptionCategories:
    """Tests for exception categorisation."""

    def test_storage_errors_are_logged(self) -> None:
        """Test storage failures fall into the log category."""
        assert isinstance(OperationalError("SELECT 1", {}, Exception("gone")), MUST_LOG)
        assert not isinstance(ValueError(), MUST_LOG)

    def test_ledger_write_error_is_not_a_storage_error(self) -> None:
        """Test ledger write failures fall outside the log category."""
        error = LedgerWriteError("in_1")

        assert not isinstance(error, MUST_LOG)
        assert error.event_id == "in_1"
        assert "in_1" in str(error)
