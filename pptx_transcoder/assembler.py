import io
import logging
import zipfile
import zlib
from typing import Optional

from .config import TranscoderConfig
from .errors import GenerationError
from .models import Package
from .oxml import to_bytes

logger = logging.getLogger(__name__)


def assemble(package: Package, language: str, config: Optional[TranscoderConfig] = None) -> bytes:
    """Build the output archive for one language.

    Non-slide parts are copied byte-for-byte in their original order; slide
    parts get their rewritten XML when there is one.
    """
    config = config or TranscoderConfig()
    slides = package.slide_parts
    translated = sum(s.translated_count for s in package.slides)
    rewritten = 0

    buffer = io.BytesIO()
    try:
        with zipfile.ZipFile(
            buffer,
            "w",
            compression=zipfile.ZIP_DEFLATED,
            compresslevel=config.compression_level,
        ) as out:
            for name, source_info in package.parts.items():
                info = zipfile.ZipInfo(name, date_time=source_info.date_time)
                info.external_attr = source_info.external_attr
                info.compress_type = (
                    zipfile.ZIP_STORED if source_info.is_dir() else zipfile.ZIP_DEFLATED
                )
                slide = slides.get(name)
                if slide is not None and slide.modified_xml is not None:
                    data = to_bytes(slide.modified_xml)
                    rewritten += 1
                else:
                    data = package.read_part(name)
                out.writestr(info, data, compresslevel=config.compression_level)
    # NotImplementedError: unsupported compression method; RuntimeError: encrypted member
    except (
        zipfile.BadZipFile,
        zlib.error,
        OSError,
        ValueError,
        NotImplementedError,
        RuntimeError,
    ) as exc:
        raise GenerationError(language, f"Failed to write package: {exc}") from exc
    finally:
        package.close()

    data = buffer.getvalue()
    _verify(package, data, language)

    ratio = len(data) / package.source_size if package.source_size else 1.0
    logger.info(
        "Generated %s package: %d bytes (%.1f%% of original), %d slides rewritten",
        language,
        len(data),
        ratio * 100,
        rewritten,
    )
    if translated and ratio < config.min_output_ratio:
        raise GenerationError(
            language,
            f"Generated package suspiciously small: {len(data)} bytes vs "
            f"{package.source_size} bytes ({ratio:.1%})",
        )
    if not translated:
        logger.warning(
            "No elements were translated for %s; output is identical to the input apart from compression",
            language,
        )
    return data


def _verify(package: Package, data: bytes, language: str) -> None:
    try:
        with zipfile.ZipFile(io.BytesIO(data)) as check:
            names = check.namelist()
            bad = check.testzip()
    except (zipfile.BadZipFile, zlib.error) as exc:
        raise GenerationError(language, f"Generated archive is unreadable: {exc}") from exc
    if bad is not None:
        raise GenerationError(language, f"Generated archive has a corrupt member: {bad}")
    if names != list(package.parts):
        raise GenerationError(language, "Generated archive does not match the source part list")
