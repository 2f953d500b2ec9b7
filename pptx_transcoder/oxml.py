"""Shared lxml helpers for reading and writing package XML parts."""

from lxml import etree

NAMESPACES = {
    "a": "http://schemas.openxmlformats.org/drawingml/2006/main",
    "p": "http://schemas.openxmlformats.org/presentationml/2006/main",
    "r": "http://schemas.openxmlformats.org/officeDocument/2006/relationships",
    "ct": "http://schemas.openxmlformats.org/package/2006/content-types",
    "pr": "http://schemas.openxmlformats.org/package/2006/relationships",
}


def make_parser() -> etree.XMLParser:
    # No entity expansion or network access; keep whitespace as authored.
    return etree.XMLParser(
        resolve_entities=False,
        no_network=True,
        huge_tree=False,
        remove_blank_text=False,
    )


def to_bytes(xml: str) -> bytes:
    # Parts are decoded with surrogateescape, so this restores the exact bytes.
    return xml.encode("utf-8", errors="surrogateescape")


def parse_xml(data) -> etree._Element:
    if isinstance(data, str):
        data = to_bytes(data)
    return etree.fromstring(data, parser=make_parser())


def serialize(root: etree._Element) -> str:
    tree = root.getroottree()
    out = etree.tostring(
        tree,
        xml_declaration=True,
        encoding="UTF-8",
        standalone=tree.docinfo.standalone,
    )
    return out.decode("utf-8")
