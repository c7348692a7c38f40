"""
HTTP API for the Mermaid document viewer.

This module provides a FastAPI-based REST API for uploading Markdown and
Mermaid files, extracting their diagrams, and validating diagram syntax.
"""
