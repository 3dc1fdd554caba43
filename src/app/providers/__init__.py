"""
AI / Payload Provider Abstraction.

모델 교체 가능하게 설계. 모델명은 config만 SSOT.
"""

from .anthropic import ClaudeProvider
from .base import (
    CompletionError,
    CompletionResult,
    LLMProvider,
    PayloadBuildError,
    PayloadBuilder,
    ProviderError,
)
from .payload import HttpPayloadBuilder
from .perplexity import PerplexityProvider

__all__ = [
    "LLMProvider",
    "PayloadBuilder",
    "CompletionResult",
    "ProviderError",
    "CompletionError",
    "PayloadBuildError",
    "PerplexityProvider",
    "ClaudeProvider",
    "HttpPayloadBuilder",
]
