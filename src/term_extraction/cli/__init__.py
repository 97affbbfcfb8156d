"""
CLI module for term extraction.

Provides command-line tools for term extraction, enrichment and benchmarking.
"""

from term_extraction.cli.extract import main as extract_main

__all__ = ["extract_main"]
