"""Write translated strings back into slide XML.

Substitution walks the parsed tree and replaces a leaf node's text in place,
so attributes, siblings and namespace declarations are never touched. For each
element the first strategy that changes the document wins, and it replaces
every matching occurrence on the slide:

1. text leaves of the tag the element was extracted from (``a:t``)
2. any childless element whose text is the original
3. substring replacement inside the text of element nodes not yet written,
   re-parsed to confirm the result is still well-formed

Strategy 3 is a last resort for text the tree walk cannot line up with a
single node. When nothing matches, an ``UnresolvedSubstitution`` is recorded
on the slide and the fragment is left as it was.
"""

import logging
from typing import Dict, List, Set

from lxml import etree

from .errors import UnresolvedSubstitution
from .extractor import TEXT_LEAF
from .models import Slide, TextElement
from .oxml import parse_xml, serialize

logger = logging.getLogger(__name__)

def escape_xml(text: str) -> str:
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def _swap_core(text: str, original: str, translated: str) -> str:
    # Keep the node's own leading and trailing whitespace.
    start = len(text) - len(text.lstrip())
    return text[:start] + translated + text[start + len(original):]


class _SlideDocument:
    def __init__(self, xml: str):
        self.root = parse_xml(xml)
        self.nodes = list(self.root.iter())
        self.touched: Set[int] = set()
        self.changed = False

    def _replace_where(self, original: str, translated: str, accept) -> int:
        count = 0
        for pos, node in enumerate(self.nodes):
            if pos in self.touched or not accept(node):
                continue
            text = node.text or ""
            if text.strip() != original:
                continue
            node.text = _swap_core(text, original, translated)
            self.touched.add(pos)
            count += 1
        if count:
            self.changed = True
        return count

    def replace_in_tag(self, tag: str, original: str, translated: str) -> int:
        return self._replace_where(original, translated, lambda node: node.tag == tag)

    def replace_in_any_leaf(self, original: str, translated: str) -> int:
        return self._replace_where(
            original,
            translated,
            lambda node: isinstance(node.tag, str) and len(node) == 0,
        )

    def replace_substring(self, original: str, translated: str) -> int:
        # Comments and processing instructions have non-str tags.
        edits = [
            (pos, node, node.text)
            for pos, node in enumerate(self.nodes)
            if pos not in self.touched
            and isinstance(node.tag, str)
            and node.text
            and original in node.text
        ]
        if not edits:
            return 0

        try:
            for _, node, text in edits:
                node.text = text.replace(original, translated)
            parse_xml(serialize(self.root))
        except etree.XMLSyntaxError as exc:
            self._revert(edits)
            logger.warning("Discarded substring replacement of %r: %s", original, exc)
            return 0
        except ValueError:
            self._revert(edits)
            raise

        self.touched.update(pos for pos, _, _ in edits)
        self.changed = True
        return sum(text.count(original) for _, _, text in edits)

    @staticmethod
    def _revert(edits) -> None:
        for _, node, text in edits:
            node.text = text

    def serialize(self) -> str:
        return serialize(self.root)


def rewrite(slide: Slide) -> Slide:
    """Set ``slide.modified_xml`` from the translated elements; never raises."""
    slide.modified_xml = None
    slide.warnings = []
    pending = [e for e in slide.text_elements if e.translated_text is not None]
    if not pending:
        return slide

    try:
        doc = _SlideDocument(slide.original_xml)
    except (etree.XMLSyntaxError, ValueError) as exc:
        for element in pending:
            _unresolved(slide, element, f"slide XML unparsable: {exc}")
        return slide

    applied: Dict[str, str] = {}
    for element in pending:
        original, translated = element.original_text, element.translated_text
        if translated == original:
            continue
        if original in applied:
            if applied[original] != translated:
                logger.debug(
                    "%s: %r already replaced with %r", element.id, original, applied[original]
                )
            continue

        strategies = [
            ("tag", lambda: doc.replace_in_tag(element.leaf_tag or TEXT_LEAF, original, translated)),
            ("leaf", lambda: doc.replace_in_any_leaf(original, translated)),
            ("substring", lambda: doc.replace_substring(original, translated)),
        ]
        for name, attempt in strategies:
            try:
                count = attempt()
            except ValueError as exc:
                # lxml refuses control characters and unpaired surrogates.
                logger.debug("%s: %r rejected by lxml: %s", element.id, translated, exc)
                _unresolved(slide, element, "translation contains characters not allowed in XML")
                break
            if count:
                applied[original] = translated
                logger.debug(
                    "%s: replaced %d occurrence(s) via %s: %r -> %r",
                    element.id,
                    count,
                    name,
                    original,
                    translated,
                )
                break
        else:
            _unresolved(slide, element, "no matching text in slide XML")

    if doc.changed:
        slide.modified_xml = doc.serialize()
    if slide.warnings:
        logger.warning(
            "%s: %d translated element(s) could not be written", slide.id, len(slide.warnings)
        )
    return slide


def rewrite_all(slides: List[Slide]) -> List[Slide]:
    return [rewrite(slide) for slide in slides]


def _unresolved(slide: Slide, element: TextElement, reason: str) -> None:
    element.is_translated = False
    warning = UnresolvedSubstitution(element.id, element.original_text, reason)
    slide.warnings.append(warning)
    logger.warning("Unresolved substitution %s", warning)
