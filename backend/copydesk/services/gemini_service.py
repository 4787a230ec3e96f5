"""
Copydesk Backend — Google Gemini Service Implementation
=========================================================

What:  Concrete LLMService backed by the Google Gemini API.
How:   Sends the review prompt as a single user-role message with a bounded
       output-token budget and returns the reply text.
Who:   Built once in create_app() and injected into AnalysisService.
When:  Called once per analysis request, after standards are loaded.

Failure handling:
    One attempt per request. SDK/network errors are logged with timing and
    re-raised as LLMServiceError; the analysis fault boundary turns that into
    a 500. A reply the SDK cannot render as text (blocked or empty candidate)
    is returned as "" so the caller falls back to its default result.
"""

import logging
import time
import uuid

import google.generativeai as genai

from copydesk.config import Settings, settings
from copydesk.exceptions import LLMServiceError
from copydesk.services.llm_base import LLMService

logger = logging.getLogger(__name__)


class GeminiService(LLMService):
    """
    Google Gemini implementation for content standards review.

    Holds a configured GenerativeModel; instances carry no per-request state
    and are safe to share across concurrent requests.
    """

    def __init__(self, api_key: str, model_name: str, max_output_tokens: int):
        # The SDK keeps auth in module-level state
        if api_key and api_key != "your_gemini_api_key_here":
            genai.configure(api_key=api_key)

        self.model_name = model_name
        self.max_output_tokens = max_output_tokens
        self.model = genai.GenerativeModel(model_name)

        logger.info(
            "GeminiService initialized with model=%s, max_output_tokens=%d",
            model_name,
            max_output_tokens,
        )

    @classmethod
    def from_settings(cls, config: Settings = settings) -> "GeminiService":
        return cls(
            api_key=config.gemini_api_key,
            model_name=config.gemini_model,
            max_output_tokens=config.llm_max_output_tokens,
        )

    async def generate(self, prompt: str) -> str:
        """
        Send the prompt to Gemini and return the reply text.

        Raises:
            LLMServiceError: Gemini call failed (network, auth, quota, ...)
        """
        request_id = str(uuid.uuid4())[:8]
        start_time = time.time()

        logger.info(
            "[%s] Sending %d-char prompt to Gemini model %s",
            request_id,
            len(prompt),
            self.model_name,
        )

        try:
            response = await self.model.generate_content_async(
                [{"role": "user", "parts": [prompt]}],
                generation_config=genai.GenerationConfig(
                    max_output_tokens=self.max_output_tokens,
                ),
            )
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.warning(
                "[%s] Gemini API call failed after %.0fms: %s",
                request_id,
                duration_ms,
                str(e),
            )
            raise LLMServiceError(
                message=str(e) or type(e).__name__,
                context={"request_id": request_id, "error_type": type(e).__name__},
            ) from e

        duration_ms = (time.time() - start_time) * 1000

        # .text raises ValueError when the candidate has no text part
        # (safety block, empty finish); treat that as an empty reply.
        try:
            reply = response.text or ""
        except ValueError as e:
            logger.warning("[%s] Gemini reply had no text: %s", request_id, str(e))
            reply = ""

        logger.info(
            "[%s] Gemini reply received in %.0fms, %d chars",
            request_id,
            duration_ms,
            len(reply),
        )
        return reply

    async def health_check(self) -> bool:
        """
        Check if Gemini API is reachable.

        How:     Lists available models (no token cost).
        Returns: True if reachable and authenticated, False otherwise.
        """
        try:
            model_names = [m.name for m in genai.list_models()]
            target = f"models/{self.model_name}"
            if target not in model_names:
                logger.warning("Configured model %s not found in available models", target)
            return True
        except Exception as e:
            logger.warning("Gemini health check failed: %s", str(e))
            return False
