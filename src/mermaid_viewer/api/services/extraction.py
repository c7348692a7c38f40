"""Extraction service that wraps the core diagram extractor for stored files."""

from pathlib import Path
from typing import Dict, Any, List, Optional

from ..models.config import APIConfig
from ..models.responses import DiagramInfo, DiagramNavigation
from .file_manager import FileManager
from ...core.document_parser import DocumentParser
from ...core.extractor import DiagramBlockExtractor
from ...utils.config import Config


class ExtractionService:
    """Service for extracting diagrams from uploaded files and request bodies."""

    def __init__(self, config: APIConfig, file_manager: Optional[FileManager] = None):
        self.config = config
        self.file_manager = file_manager or FileManager(config)
        self.extractor = DiagramBlockExtractor()
        self.parser = DocumentParser(extractor=self.extractor)

    def extract_from_text(self, markdown: str) -> List[DiagramInfo]:
        """Extract diagrams from Markdown text."""
        return [
            DiagramInfo(**record.to_dict())
            for record in self.extractor.extract(markdown)
        ]

    def extract_raw_from_text(self, markdown: str) -> List[str]:
        """Extract diagram bodies from Markdown text."""
        return self.extractor.extract_raw(markdown)

    def extract_from_file(self, file_id: str) -> Optional[List[DiagramInfo]]:
        """
        Extract diagrams from a stored file.

        Markdown files go through the block extractor. Mermaid files are a
        single diagram titled after the file name. Other types hold none.

        Args:
            file_id: Stored file identifier

        Returns:
            List of diagrams, or None if the file does not exist
        """
        content = self.file_manager.read_content(file_id)
        if content is None:
            return None

        extension = Path(file_id).suffix.lower()

        if extension in Config.MARKDOWN_EXTENSIONS:
            return self.extract_from_text(content)

        if extension in Config.MERMAID_EXTENSIONS and content.strip():
            lines = content.split('\n')
            return [DiagramInfo(
                content=content.strip(),
                index=0,
                title=Path(self.file_manager.original_name(file_id)).stem,
                start_line=0,
                end_line=len(lines) - 1,
                raw_block=content
            )]

        return []

    def get_diagram(self, file_id: str, index: int) -> Optional[Dict[str, Any]]:
        """
        Get one diagram of a stored file with navigation information.

        Returns:
            None if the file does not exist, otherwise a dictionary with
            "total" and, when the index is in range, "diagram" and "navigation"
        """
        diagrams = self.extract_from_file(file_id)
        if diagrams is None:
            return None

        total = len(diagrams)
        if index >= total:
            return {"total": total}

        return {
            "total": total,
            "diagram": diagrams[index],
            "navigation": DiagramNavigation(
                current=index,
                total=total,
                has_previous=index > 0,
                has_next=index < total - 1,
                previous_index=index - 1 if index > 0 else None,
                next_index=index + 1 if index < total - 1 else None
            )
        }

    def parse_document(self, file_id: str) -> Optional[Dict[str, Any]]:
        """Parse a stored Markdown file into sections, diagrams and a TOC."""
        content = self.file_manager.read_content(file_id)
        if content is None:
            return None
        return self.parser.parse(content).to_dict()
