import io
import logging
import os
import re
import zipfile
import zlib
from typing import Dict, List, Optional

from lxml import etree
from pptx.opc.constants import CONTENT_TYPE as CT
from pptx.opc.constants import RELATIONSHIP_TYPE as RT

from .config import TranscoderConfig
from .errors import PackageLoadError
from .models import Package, Slide
from .oxml import NAMESPACES, parse_xml

logger = logging.getLogger(__name__)

CONTENT_TYPES_PART = "[Content_Types].xml"
ROOT_RELS_PART = "_rels/.rels"
SLIDE_PART_RE = re.compile(r"^ppt/slides/slide(\d+)\.xml$")

VALID_EXTENSIONS = (".pptx",)


def load(data: bytes, config: Optional[TranscoderConfig] = None) -> Package:
    config = config or TranscoderConfig()
    if not isinstance(data, (bytes, bytearray)):
        raise PackageLoadError(f"Expected package bytes, got {type(data).__name__}")
    data = bytes(data)
    if len(data) > config.max_package_bytes:
        raise PackageLoadError(
            f"Package too large: {len(data)} bytes > {config.max_package_bytes} bytes"
        )

    try:
        archive = zipfile.ZipFile(io.BytesIO(data))
    except (zipfile.BadZipFile, zipfile.LargeZipFile, ValueError) as exc:
        raise PackageLoadError(f"Not a valid package archive: {exc}") from exc

    with archive:
        parts: Dict[str, zipfile.ZipInfo] = {}
        for info in archive.infolist():
            parts[info.filename] = info

        for required in (CONTENT_TYPES_PART, ROOT_RELS_PART):
            if required not in parts:
                raise PackageLoadError(f"Missing required part: {required}")

        main_part = _resolve_main_part(archive)
        if main_part not in parts:
            raise PackageLoadError(f"Missing main document part: {main_part}")
        _check_content_types(archive, main_part)

        slides = _index_slides(archive, parts)

    logger.info(
        "Loaded package: %d parts, %d slides (%d bytes)",
        len(parts),
        len(slides),
        len(data),
    )
    return Package(source=data, parts=parts, main_part=main_part, slides=slides)


def load_path(path: str, config: Optional[TranscoderConfig] = None) -> Package:
    if not path.lower().endswith(VALID_EXTENSIONS):
        raise PackageLoadError(
            f"Invalid file type. Please select a PowerPoint file (.pptx). Selected: {os.path.basename(path)}"
        )
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as exc:
        raise PackageLoadError(f"Cannot read {path}: {exc}") from exc
    return load(data, config)


def _read_xml(archive: zipfile.ZipFile, name: str):
    try:
        return parse_xml(archive.read(name))
    except (
        etree.XMLSyntaxError,
        zipfile.BadZipFile,
        zlib.error,
        ValueError,
        NotImplementedError,
        RuntimeError,
    ) as exc:
        raise PackageLoadError(f"Unreadable part {name}: {exc}") from exc


def _resolve_main_part(archive: zipfile.ZipFile) -> str:
    rels = _read_xml(archive, ROOT_RELS_PART)
    for rel in rels.iterfind("pr:Relationship", NAMESPACES):
        if rel.get("Type") == RT.OFFICE_DOCUMENT and rel.get("TargetMode") != "External":
            target = rel.get("Target") or ""
            return target.lstrip("/")
    raise PackageLoadError("Root relationships do not reference a main document part")


def _check_content_types(archive: zipfile.ZipFile, main_part: str):
    types = _read_xml(archive, CONTENT_TYPES_PART)
    for override in types.iterfind("ct:Override", NAMESPACES):
        if (override.get("PartName") or "").lstrip("/") == main_part:
            content_type = override.get("ContentType")
            if content_type != CT.PML_PRESENTATION_MAIN:
                logger.warning(
                    "Main part %s has content type %s, not a presentation",
                    main_part,
                    content_type,
                )
            return
    logger.warning("Content-types manifest has no override for %s", main_part)


def _index_slides(archive: zipfile.ZipFile, parts: Dict[str, zipfile.ZipInfo]) -> List[Slide]:
    numbered = []
    for name in parts:
        m = SLIDE_PART_RE.match(name)
        if m:
            numbered.append((int(m.group(1)), name))
    if not numbered:
        raise PackageLoadError("Package contains no slide parts")
    numbered.sort()

    numbers = [num for num, _ in numbered]
    if numbers != list(range(1, len(numbers) + 1)):
        raise PackageLoadError(
            f"Slide parts are not numbered sequentially: {numbers}"
        )

    slides: List[Slide] = []
    for num, name in numbered:
        try:
            raw = archive.read(parts[name])
        except (
            zipfile.BadZipFile,
            zipfile.LargeZipFile,
            zlib.error,
            NotImplementedError,
            RuntimeError,
        ) as exc:
            raise PackageLoadError(f"Cannot read slide part {name}: {exc}") from exc
        slides.append(
            Slide(
                index=num - 1,
                id=f"slide{num}",
                part_name=name,
                original_xml=raw.decode("utf-8", errors="surrogateescape"),
            )
        )
    return slides
