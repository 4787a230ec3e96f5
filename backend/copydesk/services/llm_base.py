"""
Copydesk Backend — Abstract LLM Service Interface
===================================================

What:  Abstract base class defining the contract for text-generation clients.
How:   Concrete implementations inherit from LLMService and implement generate().
Who:   Injected into AnalysisService when the app is created; tests inject a
       fake implementation through the same seam.
"""

from abc import ABC, abstractmethod


class LLMService(ABC):
    """
    Abstract interface for single-turn text generation.

    Contract:
        - generate() sends one user-role message and returns the reply text
        - Exactly one upstream call per generate(); no retries
        - Provider errors are raised as LLMServiceError
        - A reply with no usable text is returned as an empty string
          (the caller downgrades it to a low-confidence result)

    Implementations:
        - GeminiService: Google Gemini API (default)
    """

    @abstractmethod
    async def generate(self, prompt: str) -> str:
        """
        Send a prompt to the model and return its text reply.

        Args:
            prompt: The complete instruction, sent as a single user message.

        Returns:
            str: The model's reply. Empty string when the reply has no text.

        Raises:
            LLMServiceError: When the upstream call fails.

        Performance:
            Typically several seconds; this is the dominant latency of an
            analysis request.
        """
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Check if the generation API is reachable and operational.

        Returns: True if service is reachable, False otherwise. Never raises.
        """
        ...
