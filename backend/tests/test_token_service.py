"""
Copydesk Backend — Token Service Unit Tests
=============================================

What we test:
    ✅ Authorization header parsing
    ✅ Valid token resolves to the joined user identity
    ✅ Lookup only matches tokens that have not expired
    ✅ Unknown or expired tokens are rejected with one message
    ✅ DB faults during verify become InternalError
"""

from datetime import datetime, timezone

import pytest
from sqlalchemy.dialects import postgresql

from conftest import query_result, token_row
from copydesk.exceptions import AuthError, InternalError
from copydesk.services.token_service import (
    INVALID_TOKEN_MESSAGE,
    NO_TOKEN_MESSAGE,
    TokenService,
    extract_bearer_token,
)


class TestExtractBearerToken:

    def test_extracts_token(self):
        assert extract_bearer_token("Bearer abc123") == "abc123"

    def test_takes_second_space_separated_field(self):
        assert extract_bearer_token("Bearer abc123 trailing") == "abc123"

    def test_double_space_yields_empty_token(self):
        assert extract_bearer_token("Bearer   abc123") == ""

    @pytest.mark.parametrize("header", [None, "", "abc123", "Basic dXNlcjpwdw==", "bearer abc123"])
    def test_rejects_missing_or_malformed(self, header):
        with pytest.raises(AuthError) as exc_info:
            extract_bearer_token(header)
        assert exc_info.value.message == NO_TOKEN_MESSAGE


class TestTokenService:

    def setup_method(self):
        self.service = TokenService()

    @pytest.mark.asyncio
    async def test_resolve_identity(self, mock_db_session):
        mock_db_session.execute.return_value = query_result(first=token_row())

        identity = await self.service.resolve_identity(mock_db_session, "a" * 64)

        assert identity.id == 7
        assert identity.username == "ada"
        assert identity.display_name == "Ada L."
        assert identity.role == "writer"

    @pytest.mark.asyncio
    async def test_lookup_filters_on_expiry(self, mock_db_session):
        """Only rows whose expires_at is after the current time can match."""
        mock_db_session.execute.return_value = query_result(first=token_row())

        before = datetime.now(timezone.utc)
        await self.service.resolve_identity(mock_db_session, "a" * 64)
        after = datetime.now(timezone.utc)

        statement = mock_db_session.execute.await_args[0][0]
        compiled = statement.compile(dialect=postgresql.dialect())
        sql = str(compiled)

        assert "figma_tokens.expires_at >" in sql
        assert "figma_tokens.token =" in sql
        assert compiled.params["token_1"] == "a" * 64
        assert before <= compiled.params["expires_at_1"] <= after

    @pytest.mark.asyncio
    async def test_resolve_empty_token_skips_query(self, mock_db_session):
        assert await self.service.resolve_identity(mock_db_session, "") is None
        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_or_expired_token(self, mock_db_session):
        """The expiry filter lives in the query, so both cases return no row."""
        mock_db_session.execute.return_value = query_result(first=None)

        with pytest.raises(AuthError) as exc_info:
            await self.service.authenticate_bearer(mock_db_session, "Bearer deadbeef")

        assert exc_info.value.message == INVALID_TOKEN_MESSAGE

    @pytest.mark.asyncio
    async def test_bearer_with_blank_token(self, mock_db_session):
        with pytest.raises(AuthError) as exc_info:
            await self.service.authenticate_bearer(mock_db_session, "Bearer    ")

        assert exc_info.value.message == INVALID_TOKEN_MESSAGE

    @pytest.mark.asyncio
    async def test_verify_success(self, mock_db_session):
        mock_db_session.execute.return_value = query_result(first=token_row())

        result = await self.service.verify(mock_db_session, "Bearer " + "a" * 64)

        assert result.valid is True
        assert result.user.username == "ada"

    @pytest.mark.asyncio
    async def test_verify_without_header(self, mock_db_session):
        with pytest.raises(AuthError) as exc_info:
            await self.service.verify(mock_db_session, None)

        assert exc_info.value.message == NO_TOKEN_MESSAGE

    @pytest.mark.asyncio
    async def test_verify_database_failure(self, mock_db_session):
        mock_db_session.execute.side_effect = RuntimeError("pool exhausted")

        with pytest.raises(InternalError) as exc_info:
            await self.service.verify(mock_db_session, "Bearer abc")

        assert exc_info.value.message == "Internal server error"
