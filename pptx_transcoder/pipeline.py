import logging
from typing import Dict, List, Optional, TextIO

from tqdm import tqdm

from .assembler import assemble
from .config import TranscoderConfig
from .errors import TranscodeJobError, TranscoderError
from .extractor import extract
from .glossary import GlossaryEntry, apply_glossary
from .mapper import apply_translations
from .models import GeneratedPackage, Package, PackageStats
from .package_loader import load
from .rewriter import rewrite_all
from .translation_set import TranslationSet
from .translators import BaseTranslator

logger = logging.getLogger(__name__)


class LanguageResult:
    def __init__(
        self,
        language: str,
        output: Optional[GeneratedPackage] = None,
        error: Optional[TranscoderError] = None,
    ):
        self.language = language
        self.output = output
        self.error = error

    @property
    def ok(self) -> bool:
        return self.output is not None


class TranslationResult:
    def __init__(self, results: List[LanguageResult]):
        self.results = results

    @property
    def succeeded(self) -> List[GeneratedPackage]:
        return [r.output for r in self.results if r.ok]

    @property
    def failed(self) -> Dict[str, TranscoderError]:
        return {r.language: r.error for r in self.results if not r.ok}

    @property
    def warnings(self) -> List[str]:
        return [f"[{g.language}] {w}" for g in self.succeeded for w in g.warnings]


def transcode_language(
    source: bytes,
    translation_set: TranslationSet,
    language: str,
    config: Optional[TranscoderConfig] = None,
    log_fh: Optional[TextIO] = None,
) -> GeneratedPackage:
    """Run one language against a freshly loaded package."""
    config = config or TranscoderConfig()
    package = extract(load(source, config))
    report = apply_translations(package, translation_set, language, config)
    rewrite_all(package.slides)
    data = assemble(package, language, config)

    warnings: List[str] = [str(err) for err in package.extraction_errors]
    if report.fallback_count:
        warnings.append(
            f"{report.fallback_count} element(s) used the single-entry fallback translation"
        )
    for slide in package.slides:
        warnings.extend(str(w) for w in slide.warnings)
    stats = PackageStats.from_package(package)
    if not stats.translated_element_count:
        warnings.append("No translations were applied; output matches the original")

    if log_fh:
        write_translation_log(log_fh, package, language)
    return GeneratedPackage(language=language, data=data, stats=stats, warnings=warnings)


def translate_presentation(
    source: bytes,
    translation_set: TranslationSet,
    languages: List[str],
    config: Optional[TranscoderConfig] = None,
    log_fh: Optional[TextIO] = None,
    progress: bool = True,
) -> TranslationResult:
    """Produce one package per language; a failed language never stops the others.

    Raises ``TranscodeJobError`` only when every language failed.
    """
    config = config or TranscoderConfig()
    results: List[LanguageResult] = []

    for language in tqdm(languages, desc="Rebuilding", disable=not progress):
        try:
            output = transcode_language(source, translation_set, language, config, log_fh)
        except TranscoderError as exc:
            logger.error("Translation failed for %s: %s", language, exc)
            results.append(LanguageResult(language, error=exc))
            continue
        logger.info("Generated %s: %s", language, output.stats)
        results.append(LanguageResult(language, output=output))

    result = TranslationResult(results)
    if not result.succeeded:
        raise TranscodeJobError(result.failed)
    return result


def build_translation_set(
    package: Package,
    translator: BaseTranslator,
    languages: List[str],
    source_lang: Optional[str] = None,
    glossary: Optional[List[GlossaryEntry]] = None,
    progress: bool = True,
) -> Dict[str, Dict[str, Dict[str, str]]]:
    """Ask a Translation Provider for every distinct text of an extracted package.

    A provider failure leaves that text out of the set, so the element stays
    unresolved instead of aborting the run.
    """
    translation_set: Dict[str, Dict[str, Dict[str, str]]] = {}
    total = sum(len(s.text_elements) for s in package.slides) * len(languages)
    bar = tqdm(total=total, desc="Translating", disable=not progress)

    for slide in package.slides:
        texts = list(dict.fromkeys(e.original_text for e in slide.text_elements))
        for language in languages:
            entries = translation_set.setdefault(slide.id, {}).setdefault(language, {})
            for text in texts:
                try:
                    translated = translator.translate(text, language, source_lang)
                except Exception as exc:
                    logger.warning(
                        "Provider failed on %s [%s] %r: %s", slide.id, language, text[:60], exc
                    )
                    continue
                if glossary:
                    translated = apply_glossary(translated, glossary, language)
                if translated:
                    entries[text] = translated
            bar.update(len(slide.text_elements))

    bar.close()
    return translation_set


def write_translation_log(log_fh: TextIO, package: Package, language: str) -> None:
    for slide in package.slides:
        log_fh.write(f"## {slide.id} [{language}]\n")
        if slide.extraction_error:
            log_fh.write(f"Skipped: {slide.extraction_error}\n\n")
            continue
        if not slide.text_elements:
            log_fh.write("No text elements.\n\n")
            continue
        for element in slide.text_elements:
            log_fh.write(f"- {element.id} ({element.element_type.value})\n")
            log_fh.write("SRC:\n")
            log_fh.write(element.original_text + "\n")
            log_fh.write("DST:\n")
            if element.is_translated:
                log_fh.write((element.translated_text or "") + "\n\n")
            else:
                log_fh.write("(untranslated)\n\n")
