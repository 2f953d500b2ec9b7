import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Mapping, Optional, Tuple

from .config import TranscoderConfig
from .models import Package, TextElement
from .translation_set import TranslationSet, lookup

logger = logging.getLogger(__name__)


class MatchStrategy(str, Enum):
    EXACT = "exact"
    CASE_INSENSITIVE = "case-insensitive"
    SUBSTRING = "substring"
    # Lossy: the slide/language has a single entry and nothing else matched.
    SINGLE_ENTRY = "single-entry"


@dataclass
class MappingReport:
    language: str
    resolved: List[Tuple[str, MatchStrategy]] = field(default_factory=list)
    unresolved: List[str] = field(default_factory=list)

    @property
    def fallback_count(self) -> int:
        return sum(1 for _, s in self.resolved if s is MatchStrategy.SINGLE_ENTRY)


def match(
    text: str, entries: Mapping[str, str], single_entry_fallback: bool = True
) -> Optional[Tuple[str, MatchStrategy]]:
    if not text or not entries:
        return None

    translated = entries.get(text)
    if translated:
        return translated, MatchStrategy.EXACT

    folded = text.casefold()
    for key, translated in entries.items():
        if translated and key.casefold() == folded:
            return translated, MatchStrategy.CASE_INSENSITIVE

    for key, translated in entries.items():
        if translated and key and (key in text or text in key):
            return translated, MatchStrategy.SUBSTRING

    if single_entry_fallback and len(entries) == 1:
        (translated,) = entries.values()
        if translated:
            return translated, MatchStrategy.SINGLE_ENTRY
    return None


def resolve(
    element: TextElement,
    translation_set: TranslationSet,
    slide_id: str,
    language: str,
    config: Optional[TranscoderConfig] = None,
) -> Optional[str]:
    config = config or TranscoderConfig()
    found = match(
        element.original_text,
        lookup(translation_set, slide_id, language),
        single_entry_fallback=config.single_entry_fallback,
    )
    return found[0] if found else None


def apply_translations(
    package: Package,
    translation_set: TranslationSet,
    language: str,
    config: Optional[TranscoderConfig] = None,
) -> MappingReport:
    """Set ``translated_text`` on every element the Translation Set covers.

    Elements left unresolved stay untouched and are listed in the report.
    """
    config = config or TranscoderConfig()
    report = MappingReport(language=language)

    for slide in package.slides:
        entries = lookup(translation_set, slide.id, language)
        if not entries and slide.text_elements:
            logger.warning("No translations found for %s [%s]", slide.id, language)

        for element in slide.text_elements:
            element.translated_text = None
            element.is_translated = False
            found = match(
                element.original_text,
                entries,
                single_entry_fallback=config.single_entry_fallback,
            )
            if found is None:
                report.unresolved.append(element.id)
                logger.debug("No translation for %s: %r", element.id, element.original_text)
                continue

            translated, strategy = found
            element.translated_text = translated
            element.is_translated = True
            report.resolved.append((element.id, strategy))
            if strategy is MatchStrategy.SINGLE_ENTRY:
                logger.warning(
                    "Single-entry fallback for %s: %r -> %r",
                    element.id,
                    element.original_text,
                    translated,
                )
            else:
                logger.debug(
                    "%s %s: %r -> %r",
                    strategy.value,
                    element.id,
                    element.original_text,
                    translated,
                )

    logger.info(
        "Resolved %d/%d elements for %s (%d via single-entry fallback)",
        len(report.resolved),
        len(report.resolved) + len(report.unresolved),
        language,
        report.fallback_count,
    )
    return report
