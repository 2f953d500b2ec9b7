import csv
from typing import List, NamedTuple, Optional


class GlossaryEntry(NamedTuple):
    source: str
    target: str
    language: Optional[str] = None  # None applies to every language


def read_glossary(path: Optional[str]) -> List[GlossaryEntry]:
    """Rows are ``source,target[,language]``; rows without a source are skipped."""
    entries: List[GlossaryEntry] = []
    if not path:
        return entries
    with open(path, newline="", encoding="utf-8-sig") as f:
        for row in csv.reader(f):
            if len(row) < 2:
                continue
            src, tgt = row[0].strip(), row[1].strip()
            lang = row[2].strip().lower() if len(row) > 2 and row[2].strip() else None
            if src:
                entries.append(GlossaryEntry(src, tgt, lang))
    return entries


def apply_glossary(text: str, glossary: List[GlossaryEntry], language: Optional[str] = None) -> str:
    lang = language.lower() if language else None
    for entry in glossary:
        if entry.language is None or entry.language == lang:
            text = text.replace(entry.source, entry.target)
    return text
