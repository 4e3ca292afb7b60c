"""Folio content-document toolkit.

This package reads and validates markdown content documents that open with a
literal-map metadata block (``{:title "About" :layout :page}``), the format
consumed by Clojure-style static site generators.

The main entry point is the CLI module, which provides commands for checking
a content corpus, inspecting single documents, and scaffolding new ones.

Architecture mirrors a small pipeline:
- edn: reads and writes the metadata literal-map syntax
- extractors: split documents into metadata and body
- content: builds ContentDocument objects from files
- validation: applies page/post conventions
- check: loads configuration and checks a whole corpus
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
