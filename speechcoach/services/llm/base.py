"""
Abstract base class for LLM providers.

All LLM implementations (OpenAI, Claude, Ollama) must implement this
interface, enabling provider-agnostic evaluation in the service layer.
"""

from abc import ABC, abstractmethod


class BaseLLM(ABC):
    """Interface that every LLM provider must implement.

    Providers translate SDK-specific failures into ``ConnectionError``,
    ``TimeoutError`` or ``RuntimeError`` so callers never depend on a
    particular SDK's exception types.
    """

    @abstractmethod
    async def generate(self, prompt: str, **kwargs) -> str:
        """Run one single-turn completion and return the response text.

        Args:
            prompt: The user message sent to the model.
            **kwargs: ``system`` (instruction message), ``temperature``,
                ``max_tokens`` and ``json_mode`` (ask the backend to emit a
                JSON object when it supports doing so).

        Returns:
            The model's text response (may be empty).
        """
