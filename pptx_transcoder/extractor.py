import logging
from typing import Dict, List, Optional

from lxml import etree
from pptx.oxml.ns import qn
from pptx.util import Centipoints

from .errors import ExtractionError
from .models import ElementType, Package, Slide, StyleInfo, TextElement
from .oxml import NAMESPACES, parse_xml

logger = logging.getLogger(__name__)

TEXT_LEAF = qn("a:t")
SHAPE_TAGS = (qn("p:sp"), qn("p:graphicFrame"), qn("p:cxnSp"), qn("p:pic"))
RUN_TAGS = (qn("a:r"), qn("a:fld"))
PARAGRAPH = qn("a:p")

TITLE_HINTS = ("title", "heading")
BODY_HINTS = ("content", "body")
TITLE_PLACEHOLDERS = {"title", "ctrTitle"}
BODY_PLACEHOLDERS = {"body", "subTitle"}


def extract(package: Package) -> Package:
    """Populate every slide's text elements; unparsable slides are skipped."""
    for slide in package.slides:
        try:
            extract_slide(slide)
        except ExtractionError as exc:
            logger.error("Skipping slide during extraction: %s", exc)
    total = sum(len(s.text_elements) for s in package.slides)
    logger.info(
        "Extracted %d text elements from %d slides (%d skipped)",
        total,
        len(package.slides),
        len(package.extraction_errors),
    )
    return package


def extract_slide(slide: Slide) -> List[TextElement]:
    slide.text_elements = []
    slide.extraction_error = None
    try:
        root = parse_xml(slide.original_xml)
    except (etree.XMLSyntaxError, ValueError) as exc:
        slide.extraction_error = ExtractionError(slide.id, f"unparsable XML: {exc}")
        raise slide.extraction_error from exc

    for leaf in root.iter(TEXT_LEAF):
        text = (leaf.text or "").strip()
        if not text:
            continue
        element = TextElement(
            id=f"{slide.id}_t{len(slide.text_elements)}",
            original_text=text,
            element_type=classify(leaf),
            leaf_tag=leaf.tag,
            style_info=style_of(leaf),
        )
        slide.text_elements.append(element)
        logger.debug(
            "%s [%s]: %r", element.id, element.element_type.value, element.original_text
        )
    return slide.text_elements


def _nearest(node, tags):
    for ancestor in node.iterancestors(*tags):
        return ancestor
    return None


def _shape_name(shape) -> str:
    c_nv_pr = shape.find("./*/p:cNvPr", NAMESPACES)
    if c_nv_pr is None:
        return ""
    return (c_nv_pr.get("name") or "").lower()


def _placeholder_type(shape) -> Optional[str]:
    ph = shape.find("./*/p:nvPr/p:ph", NAMESPACES)
    if ph is None:
        return None
    # A placeholder without a type attribute is an object (body) placeholder.
    return ph.get("type", "body")


def classify(leaf) -> ElementType:
    shape = _nearest(leaf, SHAPE_TAGS)
    if shape is None:
        return ElementType.TEXT_RUN

    name = _shape_name(shape)
    if any(hint in name for hint in TITLE_HINTS):
        return ElementType.TITLE
    if any(hint in name for hint in BODY_HINTS):
        return ElementType.PARAGRAPH

    ph_type = _placeholder_type(shape)
    if ph_type in TITLE_PLACEHOLDERS:
        return ElementType.TITLE
    if ph_type in BODY_PLACEHOLDERS:
        return ElementType.PARAGRAPH

    if _nearest(leaf, (PARAGRAPH,)) is not None:
        return ElementType.PARAGRAPH
    return ElementType.SHAPE


def _flag(value: Optional[str]) -> Optional[bool]:
    if value is None:
        return None
    return value in ("1", "true")


def style_of(leaf) -> Optional[StyleInfo]:
    run = _nearest(leaf, RUN_TAGS)
    if run is None:
        return None
    rpr = run.find("a:rPr", NAMESPACES)
    if rpr is None:
        return None

    style = StyleInfo(bold=_flag(rpr.get("b")), italic=_flag(rpr.get("i")))
    for font_tag in ("a:latin", "a:ea", "a:cs"):
        font = rpr.find(font_tag, NAMESPACES)
        if font is not None and font.get("typeface"):
            style.font_family = font.get("typeface")
            break

    size = rpr.get("sz")
    if size and size.isdigit():
        style.font_size = Centipoints(int(size)).pt

    fill = rpr.find("a:solidFill", NAMESPACES)
    if fill is not None and len(fill):
        color = fill[0]
        style.color = color.get("val") or etree.QName(color).localname
    return style


def source_texts(package: Package) -> Dict[str, Dict[str, str]]:
    """Per-slide ``text_N -> text`` view of the extracted elements.

    Slides without text are omitted. This is the shape handed to external
    translators before a Translation Set comes back.
    """
    out: Dict[str, Dict[str, str]] = {}
    for slide in package.slides:
        texts = {
            f"text_{i}": element.original_text
            for i, element in enumerate(slide.text_elements)
        }
        if texts:
            out[slide.id] = texts
    return out
