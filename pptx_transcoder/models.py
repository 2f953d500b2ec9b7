import io
import zipfile
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from .errors import ExtractionError, UnresolvedSubstitution

PPTX_MIME_TYPE = (
    "application/vnd.openxmlformats-officedocument.presentationml.presentation"
)


class ElementType(str, Enum):
    TITLE = "title"
    PARAGRAPH = "paragraph"
    TEXT_RUN = "textRun"
    SHAPE = "shape"


@dataclass
class StyleInfo:
    font_family: Optional[str] = None
    font_size: Optional[float] = None  # points
    color: Optional[str] = None
    bold: Optional[bool] = None
    italic: Optional[bool] = None


@dataclass
class TextElement:
    id: str  # e.g., "slide3_t0"
    original_text: str
    element_type: ElementType
    leaf_tag: str  # Clark-notation tag of the text leaf it came from
    style_info: Optional[StyleInfo] = None
    translated_text: Optional[str] = None
    is_translated: bool = False


@dataclass
class Slide:
    index: int
    id: str
    part_name: str
    original_xml: str
    modified_xml: Optional[str] = None
    text_elements: List[TextElement] = field(default_factory=list)
    extraction_error: Optional[ExtractionError] = None
    warnings: List[UnresolvedSubstitution] = field(default_factory=list)

    @property
    def translated_count(self) -> int:
        return sum(1 for e in self.text_elements if e.is_translated)


@dataclass
class Package:
    """Structural view of one loaded presentation.

    ``parts`` keeps the archive's own member order. Only slide parts are
    decoded at load time; everything else is read from ``source`` when the
    assembler copies it through.
    """

    source: bytes
    parts: Dict[str, zipfile.ZipInfo]
    main_part: str
    slides: List[Slide] = field(default_factory=list)
    mime_type: str = PPTX_MIME_TYPE
    _archive: Optional[zipfile.ZipFile] = field(default=None, repr=False, compare=False)

    @property
    def source_size(self) -> int:
        return len(self.source)

    @property
    def slide_parts(self) -> Dict[str, Slide]:
        return {s.part_name: s for s in self.slides}

    def read_part(self, name: str) -> bytes:
        if self._archive is None:
            self._archive = zipfile.ZipFile(io.BytesIO(self.source))
        return self._archive.read(self.parts[name])

    def close(self):
        if self._archive is not None:
            self._archive.close()
            self._archive = None

    @property
    def extraction_errors(self) -> List[ExtractionError]:
        return [s.extraction_error for s in self.slides if s.extraction_error]

    def iter_elements(self):
        for slide in self.slides:
            for element in slide.text_elements:
                yield slide, element


@dataclass
class PackageStats:
    slide_count: int
    text_element_count: int
    translated_element_count: int

    @property
    def translation_rate(self) -> float:
        if not self.text_element_count:
            return 0.0
        return self.translated_element_count / self.text_element_count * 100

    @classmethod
    def from_package(cls, package: Package) -> "PackageStats":
        return cls(
            slide_count=len(package.slides),
            text_element_count=sum(len(s.text_elements) for s in package.slides),
            translated_element_count=sum(s.translated_count for s in package.slides),
        )

    def __str__(self) -> str:
        return (
            f"{self.slide_count} slides, {self.translated_element_count}/"
            f"{self.text_element_count} elements translated "
            f"({self.translation_rate:.1f}%)"
        )


@dataclass
class GeneratedPackage:
    language: str
    data: bytes
    stats: PackageStats
    mime_type: str = PPTX_MIME_TYPE
    warnings: List[str] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.data)
