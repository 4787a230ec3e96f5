"""
Copydesk Backend — Gemini Service Unit Tests (Mocked)
=======================================================

What:  Tests for GeminiService with mocked Google Generative AI SDK.
How:   Patches the genai module and model to simulate success/failure.

What we test:
    ✅ Prompt is sent once as a single user message with the token budget
    ✅ SDK failures surface as LLMServiceError (no retry)
    ✅ Replies without text become ""
    ✅ Health check returns a bool without raising
    ❌ Real API calls (use integration tests for that)
"""

import pytest
from unittest.mock import patch, MagicMock, AsyncMock, PropertyMock

from copydesk.config import Settings
from copydesk.exceptions import LLMServiceError
from copydesk.services.gemini_service import GeminiService


def make_service(mock_genai, response=None, error=None):
    mock_model = MagicMock()
    mock_model.generate_content_async = AsyncMock(return_value=response, side_effect=error)
    mock_genai.GenerativeModel.return_value = mock_model
    return GeminiService(api_key="test-key", model_name="gemini-test", max_output_tokens=512), mock_model


class TestGeminiServiceMocked:
    """Tests for GeminiService with mocked Gemini API."""

    def test_from_settings(self):
        with patch('copydesk.services.gemini_service.genai') as mock_genai:
            config = Settings(gemini_api_key="k", gemini_model="gemini-x", llm_max_output_tokens=1024)
            service = GeminiService.from_settings(config)

            assert service.model_name == "gemini-x"
            assert service.max_output_tokens == 1024
            mock_genai.configure.assert_called_once_with(api_key="k")
            mock_genai.GenerativeModel.assert_called_once_with("gemini-x")

    def test_blank_key_skips_configure(self):
        with patch('copydesk.services.gemini_service.genai') as mock_genai:
            GeminiService(api_key="", model_name="gemini-x", max_output_tokens=256)
            mock_genai.configure.assert_not_called()

    @pytest.mark.asyncio
    async def test_generate_success(self):
        """Successful API call should return the reply text."""
        with patch('copydesk.services.gemini_service.genai') as mock_genai:
            mock_response = MagicMock()
            mock_response.text = '{"score": 90}'
            service, mock_model = make_service(mock_genai, response=mock_response)

            result = await service.generate("review this")

            assert result == '{"score": 90}'
            mock_model.generate_content_async.assert_awaited_once()
            args, kwargs = mock_model.generate_content_async.call_args
            assert args[0] == [{"role": "user", "parts": ["review this"]}]
            mock_genai.GenerationConfig.assert_called_once_with(max_output_tokens=512)
            assert kwargs["generation_config"] is mock_genai.GenerationConfig.return_value

    @pytest.mark.asyncio
    async def test_generate_failure_is_not_retried(self):
        with patch('copydesk.services.gemini_service.genai') as mock_genai:
            service, mock_model = make_service(
                mock_genai, error=RuntimeError("429 Resource has been exhausted")
            )

            with pytest.raises(LLMServiceError) as exc_info:
                await service.generate("review this")

            assert exc_info.value.message == "429 Resource has been exhausted"
            assert exc_info.value.context["error_type"] == "RuntimeError"
            assert mock_model.generate_content_async.await_count == 1

    @pytest.mark.asyncio
    async def test_generate_failure_without_message(self):
        with patch('copydesk.services.gemini_service.genai') as mock_genai:
            service, _ = make_service(mock_genai, error=TimeoutError())

            with pytest.raises(LLMServiceError) as exc_info:
                await service.generate("review this")

            assert exc_info.value.message == "TimeoutError"

    @pytest.mark.asyncio
    async def test_blocked_reply_is_empty(self):
        """response.text raises ValueError when the candidate has no text."""
        with patch('copydesk.services.gemini_service.genai') as mock_genai:
            mock_response = MagicMock()
            type(mock_response).text = PropertyMock(side_effect=ValueError("blocked"))
            service, _ = make_service(mock_genai, response=mock_response)

            assert await service.generate("review this") == ""

    @pytest.mark.asyncio
    async def test_health_check_returns_bool(self):
        """Health check should return True/False without raising."""
        with patch('copydesk.services.gemini_service.genai') as mock_genai:
            mock_genai.list_models.return_value = [MagicMock()]
            service, _ = make_service(mock_genai)

            assert await service.health_check() is True

    @pytest.mark.asyncio
    async def test_health_check_failure(self):
        with patch('copydesk.services.gemini_service.genai') as mock_genai:
            mock_genai.list_models.side_effect = PermissionError("API key not valid")
            service, _ = make_service(mock_genai)

            assert await service.health_check() is False
