import argparse
import json
import logging
import os
import sys
from typing import List, Optional

from dotenv import load_dotenv

from .config import TranscoderConfig
from .errors import PackageLoadError, TranscodeJobError
from .extractor import extract, source_texts
from .glossary import read_glossary
from .package_loader import load_path
from .pipeline import build_translation_set, translate_presentation
from .translation_set import read_translation_set
from .translators import ChatGPTTranslator


def output_path(input_path: str, language: str, out_dir: Optional[str]) -> str:
    stem = os.path.splitext(os.path.basename(input_path))[0]
    directory = out_dir or os.path.dirname(os.path.abspath(input_path))
    return os.path.join(directory, f"{stem}_{language}.pptx")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="pptx-transcode",
        description="Substitute translations into PPTX slides, keeping every other part intact.",
    )
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = ap.add_subparsers(dest="command", required=True)

    ex = sub.add_parser("extract", help="Dump slide texts as JSON for external translation")
    ex.add_argument("input", help="Input .pptx path")
    ex.add_argument("-o", "--output", default=None, help="Write JSON here instead of stdout")

    tr = sub.add_parser("translate", help="Write one translated .pptx per target language")
    tr.add_argument("input", help="Input .pptx path")
    tr.add_argument(
        "--lang",
        dest="languages",
        action="append",
        required=True,
        help="Target language code; repeat for several (e.g., --lang fr --lang de)",
    )
    tr.add_argument(
        "--translations",
        default=None,
        help="Translation Set (.json or .csv). Without it, OpenAI translates the texts.",
    )
    tr.add_argument("--source", default=None, help="Source language (e.g., EN)")
    tr.add_argument(
        "--model",
        default="gpt-4o-mini",
        help="OpenAI model used when no Translation Set is given",
    )
    tr.add_argument(
        "--temperature",
        type=float,
        default=None,
        help="Sampling temperature (omit to use the model's default)",
    )
    tr.add_argument(
        "--glossary",
        default=None,
        help="CSV with source,target[,language] terms applied to provider output",
    )
    tr.add_argument("--out-dir", default=None, help="Directory for translated files")
    tr.add_argument("--log", default=None, help="File path to write translation log")
    return ap


def run_extract(args, config: TranscoderConfig) -> int:
    package = extract(load_path(args.input, config))
    payload = json.dumps(source_texts(package), ensure_ascii=False, indent=2)
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(payload + "\n")
        print(f"Saved slide texts to: {args.output}")
    else:
        print(payload)
    return 0


def run_translate(args, config: TranscoderConfig) -> int:
    languages: List[str] = [lang.strip().lower() for lang in args.languages if lang.strip()]
    package = extract(load_path(args.input, config))

    if args.translations:
        translation_set = read_translation_set(args.translations)
    else:
        translator = ChatGPTTranslator(model=args.model, temperature=args.temperature)
        translation_set = build_translation_set(
            package,
            translator,
            languages,
            source_lang=args.source,
            glossary=read_glossary(args.glossary),
        )

    log_fh = None
    if args.log:
        log_fh = open(args.log, "w", encoding="utf-8")
    try:
        result = translate_presentation(
            package.source, translation_set, languages, config=config, log_fh=log_fh
        )
    finally:
        if log_fh:
            log_fh.close()

    if args.out_dir:
        os.makedirs(args.out_dir, exist_ok=True)
    for generated in result.succeeded:
        path = output_path(args.input, generated.language, args.out_dir)
        with open(path, "wb") as f:
            f.write(generated.data)
        print(f"Saved translated presentation to: {path} ({generated.stats})")
    for warning in result.warnings:
        print(f"[WARN] {warning}")
    for language, error in result.failed.items():
        print(f"[ERROR] {language.upper()}: {error}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    config = TranscoderConfig.from_env()

    try:
        if args.command == "extract":
            return run_extract(args, config)
        return run_translate(args, config)
    except PackageLoadError as exc:
        print(f"[ERROR] Cannot load {args.input}: {exc}", file=sys.stderr)
        return 2
    except TranscodeJobError as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 1
    except (ValueError, OSError) as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
