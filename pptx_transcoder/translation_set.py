import csv
import json
import logging
import re
from typing import Dict, Mapping

logger = logging.getLogger(__name__)

# slide id -> language -> original text -> translated text
TranslationSet = Mapping[str, Mapping[str, Mapping[str, str]]]

_EMPTY: Mapping[str, str] = {}
_SLIDE_LABEL = re.compile(r"^\s*slide\s*(\d+)\s*$", re.IGNORECASE)


def lookup(translation_set: TranslationSet, slide_id: str, language: str) -> Mapping[str, str]:
    by_language = translation_set.get(slide_id) or {}
    entries = by_language.get(language)
    if entries is None:
        wanted = language.casefold()
        entries = next(
            (value for key, value in by_language.items() if key.casefold() == wanted),
            None,
        )
    return entries or _EMPTY


def slide_id_from_label(label: str) -> str:
    """``"Slide 3"``, ``"slide3"`` and ``"3"`` all name ``"slide3"``."""
    label = label.strip()
    if label.isdigit():
        return f"slide{int(label)}"
    m = _SLIDE_LABEL.match(label)
    if not m:
        raise ValueError(f"Not a slide label: {label!r}")
    return f"slide{int(m.group(1))}"


def read_translation_set(path: str) -> Dict[str, Dict[str, Dict[str, str]]]:
    if path.lower().endswith(".json"):
        return read_json(path)
    if path.lower().endswith(".csv"):
        return read_csv(path)
    raise ValueError(f"Unsupported Translation Set format: {path}")


def read_json(path: str) -> Dict[str, Dict[str, Dict[str, str]]]:
    with open(path, encoding="utf-8-sig") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError("Translation Set JSON must be an object keyed by slide id")

    out: Dict[str, Dict[str, Dict[str, str]]] = {}
    for slide_label, by_language in data.items():
        if not isinstance(by_language, dict):
            raise ValueError(f"Entry for {slide_label!r} must be an object keyed by language")
        slide_id = slide_id_from_label(slide_label)
        for language, entries in by_language.items():
            if not isinstance(entries, dict):
                raise ValueError(
                    f"Entry for {slide_label!r}/{language!r} must map original to translated text"
                )
            target = out.setdefault(slide_id, {}).setdefault(language.lower(), {})
            for original, translated in entries.items():
                _add(target, str(original), translated)
    return out


def read_csv(path: str) -> Dict[str, Dict[str, Dict[str, str]]]:
    """Read the sheet layout: ``Slide, Original Text, <LANG>, <LANG>...``."""
    out: Dict[str, Dict[str, Dict[str, str]]] = {}
    with open(path, newline="", encoding="utf-8-sig") as f:
        reader = csv.reader(f)
        header = next(reader, None)
        if not header or len(header) < 3:
            logger.warning("No translation columns found in %s", path)
            return out
        languages = [h.strip().lower() for h in header[2:]]

        for row in reader:
            if len(row) < 3 or not row[0].strip() or not row[1].strip():
                continue
            try:
                slide_id = slide_id_from_label(row[0])
            except ValueError:
                logger.warning("Skipping row with unknown slide label %r", row[0])
                continue
            original = row[1].strip()
            for language, cell in zip(languages, row[2:]):
                if language:
                    target = out.setdefault(slide_id, {}).setdefault(language, {})
                    _add(target, original, cell)
    logger.info("Read translations for %d slides from %s", len(out), path)
    return out


def _add(target: Dict[str, str], original: str, translated) -> None:
    if not isinstance(translated, str):
        return
    translated = translated.strip()
    # Blank cells, untranslated copies and unevaluated formulas carry nothing.
    if not translated or translated == original or translated.startswith("="):
        return
    target[original] = translated
