import zipfile

import pytest

from conftest import build_package, shape, slide_xml
from pptx_transcoder import PackageLoadError, TranscoderConfig, load, load_path
from pptx_transcoder.models import PPTX_MIME_TYPE


def test_load_indexes_parts_and_slides(simple_package):
    package = load(simple_package)

    assert list(package.parts)[:3] == [
        "[Content_Types].xml",
        "_rels/.rels",
        "ppt/presentation.xml",
    ]
    assert package.main_part == "ppt/presentation.xml"
    assert [s.id for s in package.slides] == ["slide1", "slide2"]
    assert [s.index for s in package.slides] == [0, 1]
    assert package.slides[1].part_name == "ppt/slides/slide2.xml"
    assert "Goodbye" in package.slides[1].original_xml
    assert package.mime_type == PPTX_MIME_TYPE
    assert package.source_size == len(simple_package)


def test_slides_sorted_numerically():
    slides = [slide_xml(shape("TextBox", f"Text {i}")) for i in range(1, 12)]
    package = load(build_package(slides))
    assert [s.id for s in package.slides] == [f"slide{i}" for i in range(1, 12)]
    assert "Text 10" in package.slides[9].original_xml


def test_binary_parts_are_not_decoded_until_read():
    data = build_package(
        [slide_xml(shape("TextBox", "Hi"))],
        extra={"ppt/media/image1.png": b"\x89PNG\r\n\x1a\n\x00\xff"},
    )
    package = load(data)
    assert "ppt/media/image1.png" in package.parts
    assert package.read_part("ppt/media/image1.png") == b"\x89PNG\r\n\x1a\n\x00\xff"
    package.close()


def test_real_presentation_loads(pptx_bytes):
    package = load(pptx_bytes)
    assert len(package.slides) == 2
    assert package.main_part == "ppt/presentation.xml"


@pytest.mark.parametrize("data", [b"", b"not a zip archive", b"PK\x03\x04garbage"])
def test_corrupt_input_raises(data):
    with pytest.raises(PackageLoadError):
        load(data)


def test_non_bytes_input_raises():
    with pytest.raises(PackageLoadError):
        load("ppt/slides/slide1.xml")


@pytest.mark.parametrize("missing", ["[Content_Types].xml", "_rels/.rels", "ppt/presentation.xml"])
def test_missing_required_part_raises(missing):
    data = build_package([slide_xml(shape("TextBox", "Hi"))], skip=(missing,))
    with pytest.raises(PackageLoadError):
        load(data)


def test_package_without_slides_raises():
    with pytest.raises(PackageLoadError, match="no slide parts"):
        load(build_package([]))


def test_gap_in_slide_numbering_raises():
    data = build_package(
        [slide_xml(shape("TextBox", "One"))],
        extra={"ppt/slides/slide3.xml": slide_xml(shape("TextBox", "Three")).encode("utf-8")},
    )
    with pytest.raises(PackageLoadError, match="sequentially"):
        load(data)


def test_slide_relationship_parts_are_not_slides():
    data = build_package(
        [slide_xml(shape("TextBox", "One"))],
        extra={"ppt/slides/_rels/slide1.xml.rels": b"<Relationships/>"},
    )
    package = load(data)
    assert [s.part_name for s in package.slides] == ["ppt/slides/slide1.xml"]
    assert "ppt/slides/_rels/slide1.xml.rels" in package.parts


def test_package_size_limit(simple_package):
    config = TranscoderConfig(max_package_bytes=len(simple_package) - 1)
    with pytest.raises(PackageLoadError, match="too large"):
        load(simple_package, config)


def test_load_path_rejects_other_extensions(tmp_path, simple_package):
    path = tmp_path / "deck.zip"
    path.write_bytes(simple_package)
    with pytest.raises(PackageLoadError, match="Invalid file type"):
        load_path(str(path))


def test_load_path_reads_file(tmp_path, simple_package):
    path = tmp_path / "deck.pptx"
    path.write_bytes(simple_package)
    assert len(load_path(str(path)).slides) == 2


def test_load_path_missing_file(tmp_path):
    with pytest.raises(PackageLoadError, match="Cannot read"):
        load_path(str(tmp_path / "missing.pptx"))


def test_stored_archive_loads():
    data = build_package([slide_xml(shape("TextBox", "Hi"))], compression=zipfile.ZIP_STORED)
    assert load(data).slides[0].id == "slide1"
