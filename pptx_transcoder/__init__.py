"""
Translation transcoder for PPTX packages.

Loads a presentation archive, extracts slide text, maps externally supplied
translations onto it, rewrites slide XML in place, and reassembles a package
whose other parts are byte-identical to the original.
"""

from .assembler import assemble
from .config import TranscoderConfig
from .errors import (
    ExtractionError,
    GenerationError,
    PackageLoadError,
    TranscodeJobError,
    TranscoderError,
    UnresolvedSubstitution,
)
from .extractor import extract, source_texts
from .mapper import apply_translations, resolve
from .models import (
    ElementType,
    GeneratedPackage,
    Package,
    PackageStats,
    Slide,
    StyleInfo,
    TextElement,
)
from .package_loader import load, load_path
from .pipeline import build_translation_set, transcode_language, translate_presentation
from .rewriter import escape_xml, rewrite
from .translation_set import TranslationSet, read_translation_set

__all__ = [
    "load",
    "load_path",
    "extract",
    "source_texts",
    "resolve",
    "apply_translations",
    "rewrite",
    "escape_xml",
    "assemble",
    "transcode_language",
    "translate_presentation",
    "build_translation_set",
    "read_translation_set",
    "TranslationSet",
    "TranscoderConfig",
    "Package",
    "Slide",
    "TextElement",
    "StyleInfo",
    "ElementType",
    "PackageStats",
    "GeneratedPackage",
    "TranscoderError",
    "PackageLoadError",
    "ExtractionError",
    "GenerationError",
    "TranscodeJobError",
    "UnresolvedSubstitution",
]
