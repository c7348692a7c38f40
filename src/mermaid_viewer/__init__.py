"""
Mermaid document viewer.

Extracts Mermaid diagram definitions from uploaded Markdown files and
serves them, with titles and source-line provenance, over an HTTP API.
"""

__version__ = "1.0.0"
