"""Generation Clients"""

from .gemini_client import GeminiGenerationClient
from .mock_client import MockGenerationClient
from .openai_client import OpenAIGenerationClient
from .response_parser import parse_generation_response

__all__ = [
    "GeminiGenerationClient",
    "MockGenerationClient",
    "OpenAIGenerationClient",
    "parse_generation_response",
]
