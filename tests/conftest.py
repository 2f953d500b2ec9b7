import io
import zipfile
from typing import Dict, List, Optional

import pytest
from pptx import Presentation
from pptx.util import Inches

A_NS = "http://schemas.openxmlformats.org/drawingml/2006/main"
P_NS = "http://schemas.openxmlformats.org/presentationml/2006/main"
R_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"

XML_DECL = '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'

CONTENT_TYPES = (
    XML_DECL
    + '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
    '<Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>'
    '<Default Extension="xml" ContentType="application/xml"/>'
    '<Override PartName="/ppt/presentation.xml" '
    'ContentType="application/vnd.openxmlformats-officedocument.presentationml.presentation.main+xml"/>'
    "</Types>"
)

ROOT_RELS = (
    XML_DECL
    + '<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">'
    '<Relationship Id="rId1" '
    'Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument" '
    'Target="ppt/presentation.xml"/>'
    "</Relationships>"
)

PRESENTATION = XML_DECL + f'<p:presentation xmlns:a="{A_NS}" xmlns:p="{P_NS}" xmlns:r="{R_NS}"/>'


def shape(name: str, *texts: str, ph: Optional[str] = None, rpr: str = "", shape_id: int = 2) -> str:
    ph_xml = f'<p:ph type="{ph}"/>' if ph else ""
    paragraphs = "".join(
        f"<a:p><a:r>{rpr}<a:t>{text}</a:t></a:r></a:p>" for text in texts
    )
    return (
        "<p:sp>"
        f'<p:nvSpPr><p:cNvPr id="{shape_id}" name="{name}"/><p:cNvSpPr/><p:nvPr>{ph_xml}</p:nvPr></p:nvSpPr>'
        "<p:spPr/>"
        f"<p:txBody><a:bodyPr/><a:lstStyle/>{paragraphs}</p:txBody>"
        "</p:sp>"
    )


def slide_xml(*shapes: str) -> str:
    return (
        XML_DECL
        + f'<p:sld xmlns:a="{A_NS}" xmlns:p="{P_NS}" xmlns:r="{R_NS}">'
        "<p:cSld><p:spTree>"
        '<p:nvGrpSpPr><p:cNvPr id="1" name=""/><p:cNvGrpSpPr/><p:nvPr/></p:nvGrpSpPr>'
        "<p:grpSpPr/>"
        + "".join(shapes)
        + "</p:spTree></p:cSld></p:sld>"
    )


def build_package(
    slides: List[str],
    extra: Optional[Dict[str, bytes]] = None,
    compression: int = zipfile.ZIP_DEFLATED,
    skip: tuple = (),
) -> bytes:
    parts: Dict[str, bytes] = {
        "[Content_Types].xml": CONTENT_TYPES.encode("utf-8"),
        "_rels/.rels": ROOT_RELS.encode("utf-8"),
        "ppt/presentation.xml": PRESENTATION.encode("utf-8"),
    }
    for i, xml in enumerate(slides, start=1):
        parts[f"ppt/slides/slide{i}.xml"] = xml.encode("utf-8")
    parts.update(extra or {})

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=compression) as zf:
        for name, data in parts.items():
            if name not in skip:
                zf.writestr(name, data)
    return buffer.getvalue()


def read_parts(data: bytes) -> Dict[str, bytes]:
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        return {name: zf.read(name) for name in zf.namelist()}


@pytest.fixture
def simple_package() -> bytes:
    return build_package(
        [
            slide_xml(
                shape("Title 1", "Hello", ph="title"),
                shape("Content Placeholder 2", "First point", "Second point", shape_id=3),
            ),
            slide_xml(shape("TextBox 4", "Goodbye")),
        ]
    )


@pytest.fixture
def pptx_bytes() -> bytes:
    prs = Presentation()
    title_slide = prs.slides.add_slide(prs.slide_layouts[0])
    title_slide.shapes.title.text = "Welcome"
    title_slide.placeholders[1].text = "Quarterly review"

    blank = prs.slides.add_slide(prs.slide_layouts[6])
    for top in (1, 3):
        box = blank.shapes.add_textbox(Inches(1), Inches(top), Inches(4), Inches(1))
        box.text_frame.text = "Welcome"
    other = blank.shapes.add_textbox(Inches(1), Inches(5), Inches(4), Inches(1))
    other.text_frame.text = "Thank you"

    buffer = io.BytesIO()
    prs.save(buffer)
    return buffer.getvalue()
