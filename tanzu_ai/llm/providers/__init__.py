from .openai_compat import OpenAICompatibleAdapter

__all__ = [
    "OpenAICompatibleAdapter",
]
