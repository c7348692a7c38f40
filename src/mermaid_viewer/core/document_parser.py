"""
Markdown Document Structure Parsing

This module splits a Markdown document into typed sections (headings,
paragraphs, code, lists, blockquotes) with rendered HTML, collects its
Mermaid diagrams, and builds a table of contents for navigation.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Dict, Optional, Any

from markdown_it import MarkdownIt

from ..utils.config import Config
from .extractor import DiagramBlockExtractor, DiagramRecord


HEADING = re.compile(r'^(#+)\s+(.+)$')
LIST_ITEM = re.compile(r'^([-*+]|\d+\.)\s+')

# Raw HTML is escaped; link validation rejects javascript:, vbscript: and file: URLs
_renderer = MarkdownIt("commonmark", {"html": False})


class SectionType(Enum):
    """Types of document sections."""
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    CODE = "code"
    LIST = "list"
    BLOCKQUOTE = "blockquote"


@dataclass
class DocumentSection:
    """A contiguous run of lines of one section type."""
    id: str
    type: SectionType
    content: str  # rendered HTML
    raw_content: str
    start_line: int
    end_line: int
    level: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the camelCase keys the browser client uses."""
        data = {
            'id': self.id,
            'type': self.type.value,
            'content': self.content,
            'rawContent': self.raw_content,
            'startLine': self.start_line,
            'endLine': self.end_line
        }
        if self.level is not None:
            data['level'] = self.level
        return data


@dataclass
class TOCItem:
    """Table of contents entry for a heading or a diagram."""
    id: str
    title: str
    level: int
    line: int
    type: str  # "heading" or "diagram"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for the table of contents sidebar."""
        return {
            'id': self.id,
            'title': self.title,
            'level': self.level,
            'line': self.line,
            'type': self.type
        }


@dataclass
class DocumentContent:
    """Parsed document."""
    raw_content: str
    sections: List[DocumentSection] = field(default_factory=list)
    diagrams: List[DiagramRecord] = field(default_factory=list)
    table_of_contents: List[TOCItem] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the document; diagrams gain a `diagram-N` id for anchors."""
        return {
            'rawContent': self.raw_content,
            'sections': [s.to_dict() for s in self.sections],
            'diagrams': [
                {'id': f"diagram-{d.index}", **d.to_dict()} for d in self.diagrams
            ],
            'tableOfContents': [t.to_dict() for t in self.table_of_contents]
        }


class DocumentParser:
    """Parses Markdown documents for the document view."""

    def __init__(self, config: Optional[Config] = None,
                 extractor: Optional[DiagramBlockExtractor] = None):
        """Initialize parser with configuration."""
        self.config = config or Config()
        self.extractor = extractor or DiagramBlockExtractor(self.config)

    def parse(self, markdown: str) -> DocumentContent:
        """
        Parse a Markdown document into sections, diagrams and a TOC.

        Diagram blocks are taken from the extractor and their lines are
        excluded from the section list.
        """
        lines = markdown.split('\n')
        diagrams = self.extractor.extract(markdown)
        diagram_ends = {d.start_line: d.end_line for d in diagrams}

        document = DocumentContent(raw_content=markdown, diagrams=diagrams)
        current: List[str] = []
        current_type = SectionType.PARAGRAPH
        start_line = 0

        def flush(end_line: int):
            nonlocal current
            if current:
                self._add_section(document, current, current_type, start_line, end_line)
                current = []

        i = 0
        while i < len(lines):
            line = lines[i]
            stripped = line.strip()

            if i in diagram_ends:
                flush(i)
                i = diagram_ends[i] + 1
                continue

            if stripped.startswith('```'):
                flush(i)
                end = self._find_code_end(lines, i, diagram_ends)
                current = lines[i:end + 1]
                current_type = SectionType.CODE
                start_line = i
                flush(end + 1)
                i = end + 1
                continue

            if stripped.startswith('#'):
                flush(i)
                current = [line]
                current_type = SectionType.HEADING
                start_line = i
            elif not stripped:
                # Blank lines stay inside the current section
                if current:
                    current.append(line)
            else:
                if stripped.startswith('>'):
                    line_type = SectionType.BLOCKQUOTE
                elif LIST_ITEM.match(stripped):
                    line_type = SectionType.LIST
                else:
                    line_type = SectionType.PARAGRAPH

                if current_type != line_type:
                    flush(i)
                    current_type = line_type
                if not current:
                    start_line = i
                current.append(line)

            i += 1

        flush(len(lines))

        for diagram in diagrams:
            document.table_of_contents.append(TOCItem(
                id=f"diagram-{diagram.index}",
                title=diagram.title,
                level=self.config.TOC_DIAGRAM_LEVEL,
                line=diagram.start_line,
                type="diagram"
            ))
        document.table_of_contents.sort(key=lambda item: item.line)

        return document

    def _find_code_end(self, lines: List[str], start: int, diagram_ends: Dict[int, int]) -> int:
        """Index of the closing fence of a code block, or the last line before a diagram/EOF."""
        for j in range(start + 1, len(lines)):
            if j in diagram_ends:
                return j - 1
            if lines[j].strip().startswith('```'):
                return j
        return len(lines) - 1

    def _add_section(self, document: DocumentContent, lines: List[str],
                     section_type: SectionType, start_line: int, end_line: int):
        content = '\n'.join(lines).strip()
        if not content:
            return

        section = DocumentSection(
            id=f"section-{len(document.sections)}",
            type=section_type,
            content=render_section(content),
            raw_content=content,
            start_line=start_line,
            end_line=end_line - 1
        )

        if section_type == SectionType.HEADING:
            match = HEADING.match(content)
            if match:
                section.level = len(match.group(1))
                document.table_of_contents.append(TOCItem(
                    id=section.id,
                    title=match.group(2),
                    level=section.level,
                    line=start_line,
                    type="heading"
                ))

        document.sections.append(section)


def render_section(content: str) -> str:
    """Render the Markdown of one section to HTML."""
    return _renderer.render(content).strip()


def render_inline(text: str) -> str:
    """Render inline Markdown (strong, emphasis, code spans, links) to HTML."""
    return _renderer.renderInline(text)
