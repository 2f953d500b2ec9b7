import json

import pytest

from conftest import read_parts
from pptx_transcoder import cli, extract, load


@pytest.fixture
def deck(tmp_path, simple_package):
    path = tmp_path / "deck.pptx"
    path.write_bytes(simple_package)
    return path


def test_output_path():
    assert cli.output_path("/data/deck.pptx", "fr", "/out") == "/out/deck_fr.pptx"
    assert cli.output_path("/data/deck.pptx", "fr", None) == "/data/deck_fr.pptx"


def test_extract_command(deck, tmp_path):
    out = tmp_path / "texts.json"
    assert cli.main(["extract", str(deck), "-o", str(out)]) == 0
    assert json.loads(out.read_text(encoding="utf-8")) == {
        "slide1": {"text_0": "Hello", "text_1": "First point", "text_2": "Second point"},
        "slide2": {"text_0": "Goodbye"},
    }


def test_translate_command(deck, tmp_path, capsys):
    translations = tmp_path / "set.json"
    translations.write_text(
        json.dumps({"slide1": {"fr": {"Hello": "Bonjour", "x": "y"}}, "slide2": {"de": {"Goodbye": "Tschüss"}}}),
        encoding="utf-8",
    )
    out_dir = tmp_path / "out"
    log = tmp_path / "log.txt"
    code = cli.main(
        [
            "translate",
            str(deck),
            "--lang",
            "FR",
            "--lang",
            "de",
            "--translations",
            str(translations),
            "--out-dir",
            str(out_dir),
            "--log",
            str(log),
        ]
    )
    assert code == 0

    fr = (out_dir / "deck_fr.pptx").read_bytes()
    de = (out_dir / "deck_de.pptx").read_bytes()
    assert extract(load(fr)).slides[0].text_elements[0].original_text == "Bonjour"
    assert extract(load(de)).slides[1].text_elements[0].original_text == "Tschüss"
    assert read_parts(fr)["ppt/presentation.xml"] == read_parts(deck.read_bytes())["ppt/presentation.xml"]
    assert "Saved translated presentation to:" in capsys.readouterr().out
    assert "## slide1 [fr]" in log.read_text(encoding="utf-8")


def test_translate_command_reports_unloadable_input(tmp_path, capsys):
    bad = tmp_path / "bad.pptx"
    bad.write_bytes(b"not a zip")
    translations = tmp_path / "set.json"
    translations.write_text("{}", encoding="utf-8")
    code = cli.main(["translate", str(bad), "--lang", "fr", "--translations", str(translations)])
    assert code == 2
    assert "Cannot load" in capsys.readouterr().err


def test_extract_command_rejects_wrong_extension(tmp_path, capsys):
    other = tmp_path / "deck.key"
    other.write_bytes(b"")
    assert cli.main(["extract", str(other)]) == 2
    assert "Invalid file type" in capsys.readouterr().err


def test_translate_command_rejects_bad_translation_set(deck, tmp_path, capsys):
    translations = tmp_path / "set.xlsx"
    translations.write_bytes(b"")
    assert cli.main(["translate", str(deck), "--lang", "fr", "--translations", str(translations)]) == 2
    assert "Unsupported" in capsys.readouterr().err
