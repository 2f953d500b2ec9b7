from abc import ABC, abstractmethod
from typing import Optional


class BaseTranslator(ABC):
    """Translation Provider: one text in, one translated text out."""

    def __init__(self, model: Optional[str] = None, temperature: Optional[float] = None):
        self.model = model
        self.temperature = temperature

    @abstractmethod
    def translate(self, text: str, target_lang: str, source_lang: Optional[str] = None) -> str:
        raise NotImplementedError
