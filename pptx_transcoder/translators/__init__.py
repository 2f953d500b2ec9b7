from .base import BaseTranslator
from .chat import ChatGPTTranslator

__all__ = ["BaseTranslator", "ChatGPTTranslator"]
