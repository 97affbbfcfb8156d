"""
Command-line interface for term extraction.

Usage:
    # Extract terms from a JSON corpus
    python -m term_extraction.cli.extract extract corpus.json -o terms.json -d doc-terms.json

    # With a configuration file and a reference corpus
    python -m term_extraction.cli.extract extract corpus.json -c config.json -o terms.json

    # Count the terms of a TExEval taxonomy in a corpus
    python -m term_extraction.cli.extract enrich corpus.json -t taxonomy.tsv -o terms.json -d doc-terms.json

    # Compare an extracted taxonomy against a gold standard
    python -m term_extraction.cli.extract benchmark taxonomy.json -g gold.tsv
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, List, Optional

import structlog

from term_extraction.annotation.base import AnnotatorFactory
from term_extraction.annotation.simple import PreTaggedAnnotator, RegexAnnotator
from term_extraction.corpus import load_corpus
from term_extraction.enrich.enrich_terms import enrich_terms
from term_extraction.exceptions import TermExtractionError
from term_extraction.extraction.term_extraction import TermExtraction
from term_extraction.logging_config import setup_logging
from term_extraction.models.configuration import TermExtractionConfig, load_config
from term_extraction.scheduling.scheduler import DocumentScheduler
from term_extraction.stats.reference import save_frequency_stats
from term_extraction.taxonomy.benchmark import evaluate_taxonomy
from term_extraction.taxonomy.texeval import link_terms, load_links, load_taxonomy, read_texeval

logger = structlog.get_logger(__name__)

ANNOTATORS = ["spacy", "pretagged", "regex"]


# ============================================================================
# HELPERS
# ============================================================================

def make_annotator_factory(name: str, model_name: Optional[str] = None) -> AnnotatorFactory:
    """
    Build the annotator factory selected on the command line.

    Args:
        name: One of ``spacy``, ``pretagged`` (``word/TAG[/lemma]`` tokens) or
            ``regex`` (untagged tokens, useful for enrichment only)
        model_name: spaCy model override

    Returns:
        Factory producing one annotator per worker thread
    """
    if name == "spacy":
        # spaCy is only imported when it is actually used
        from term_extraction.annotation.spacy_annotator import SpacyAnnotatorFactory

        return SpacyAnnotatorFactory(model_name=model_name)
    if name == "pretagged":
        return PreTaggedAnnotator
    if name == "regex":
        return RegexAnnotator
    raise ValueError(f"Unknown annotator: {name}")


def write_json(data: Any, output_path: Optional[Path]) -> None:
    """
    Write JSON to a file, or to stdout when no path is given.
    """
    if output_path is None:
        print(json.dumps(data, ensure_ascii=False, indent=2))
        return

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)

    logger.info("output_written", path=str(output_path))


def _load_run_config(args: argparse.Namespace) -> TermExtractionConfig:
    config = load_config(Path(args.config)) if args.config else TermExtractionConfig()
    overrides = {}
    if getattr(args, "threads", None):
        overrides["num_threads"] = args.threads
    if getattr(args, "max_terms", None):
        overrides["max_terms"] = args.max_terms
    if getattr(args, "max_docs", None):
        overrides["max_docs"] = args.max_docs
    if overrides:
        config = config.model_copy(update=overrides)
    return config


# ============================================================================
# COMMANDS
# ============================================================================

def run_extract(args: argparse.Namespace) -> None:
    """Extract ranked terms from a corpus."""
    config = _load_run_config(args)
    corpus = load_corpus(Path(args.corpus))
    factory = make_annotator_factory(args.annotator, args.model)
    extraction = TermExtraction(config, factory)

    if args.stats_output:
        corpus_stats = extraction.extract_stats(corpus)
        save_frequency_stats(corpus_stats.stats, Path(args.stats_output))
        return

    result = extraction.extract_terms(corpus)
    write_json([t.model_dump() for t in result.topics], _path(args.output))
    if args.doc_terms_output:
        write_json(
            [dt.model_dump(exclude_none=True) for dt in result.document_topics],
            Path(args.doc_terms_output),
        )

    if result.failed_documents:
        print(f"Warning: {len(result.failed_documents)} documents failed", file=sys.stderr)
    for feature, reason in result.unavailable_features.items():
        print(f"Warning: feature {feature} skipped: {reason}", file=sys.stderr)


def run_enrich(args: argparse.Namespace) -> None:
    """Count the terms of a taxonomy in a corpus."""
    config = _load_run_config(args)
    terms = link_terms(read_texeval(Path(args.taxonomy)))
    corpus = load_corpus(Path(args.corpus))
    factory = make_annotator_factory(args.annotator, args.model)
    scheduler = DocumentScheduler(num_workers=config.num_threads)

    result = enrich_terms(terms, corpus, factory, scheduler=scheduler, max_docs=config.max_docs)
    write_json([t.model_dump() for t in result.topics], _path(args.output))
    if args.doc_terms_output:
        write_json([dt.model_dump() for dt in result.document_topics], Path(args.doc_terms_output))


def run_benchmark(args: argparse.Namespace) -> None:
    """Score an extracted taxonomy against gold edges."""
    taxonomy = load_taxonomy(Path(args.taxonomy))
    gold = load_links(Path(args.gold))
    scores = evaluate_taxonomy(taxonomy, gold)
    print(scores.to_table())


def _path(value: Optional[str]) -> Optional[Path]:
    return Path(value) if value else None


# ============================================================================
# MAIN CLI
# ============================================================================

def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with its three subcommands."""
    parser = argparse.ArgumentParser(
        prog="term-extraction",
        description="Term Extraction CLI - extract, enrich and benchmark domain terms",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s extract corpus.json -o terms.json -d doc-terms.json
  %(prog)s extract corpus.json --stats-output reference.json
  %(prog)s enrich corpus.json -t taxonomy.tsv -o terms.json
  %(prog)s benchmark taxonomy.json -g gold.tsv
        """,
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_corpus_options(sub: argparse.ArgumentParser) -> None:
        sub.add_argument("corpus", help="Corpus JSON file")
        sub.add_argument("--config", "-c", default=None, help="Configuration JSON file")
        sub.add_argument(
            "--annotator",
            "-a",
            choices=ANNOTATORS,
            default="spacy",
            help="Linguistic annotator (default: spacy)",
        )
        sub.add_argument("--model", "-m", default=None, help="Override the spaCy model name")
        sub.add_argument("--threads", type=int, default=None, help="Worker threads")
        sub.add_argument("--max-docs", type=int, default=None, help="Process at most N documents")
        sub.add_argument("--output", "-o", default=None, help="Term list output (default: stdout)")
        sub.add_argument("--doc-terms-output", "-d", default=None, help="Doc-term links output")

    extract = subparsers.add_parser("extract", help="Extract ranked terms from a corpus")
    add_corpus_options(extract)
    extract.add_argument("--max-terms", type=int, default=None, help="Maximum number of terms")
    extract.add_argument(
        "--stats-output",
        default=None,
        help="Only compute frequency statistics and write them (reference corpus format)",
    )
    extract.set_defaults(handler=run_extract)

    enrich = subparsers.add_parser("enrich", help="Count taxonomy terms in a corpus")
    add_corpus_options(enrich)
    enrich.add_argument("--taxonomy", "-t", required=True, help="Taxonomy in TExEval format")
    enrich.set_defaults(handler=run_enrich)

    benchmark = subparsers.add_parser("benchmark", help="Evaluate a taxonomy against gold edges")
    benchmark.add_argument("taxonomy", help="Extracted taxonomy JSON file")
    benchmark.add_argument("--gold", "-g", required=True, help="Gold taxonomy (TExEval or .json)")
    benchmark.set_defaults(handler=run_benchmark)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(log_level="DEBUG" if args.verbose else None)

    try:
        args.handler(args)
    except TermExtractionError as e:
        logger.error("cli_failed", **e.to_dict())
        print(f"Error: {e.message}", file=sys.stderr)
        sys.exit(1)
    except (OSError, ValueError) as e:
        logger.error("cli_failed", error=str(e), exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
