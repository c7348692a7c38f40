"""
Mermaid Diagram Block Extraction

This module scans a Markdown document line by line, finds fenced code
blocks tagged as Mermaid diagrams, and produces ordered diagram records
with a title and the source lines each diagram came from.

Title resolution order:
1. Explicit title after the fence tag (```mermaid My Title)
2. ATX heading (# Heading) within the lookback window above the fence
3. Setext heading (text underlined with = or -) within the same window
4. Synthesized "Diagram N"
"""

import re
from dataclasses import dataclass, asdict
from typing import List, Dict, Tuple, Optional, Any

from ..utils.config import Config


FENCE_CLOSE = re.compile(r'^\s*```\s*$')
ATX_HEADING = re.compile(r'^#+\s+(.+)$')
SETEXT_UNDERLINE = re.compile(r'^[=-]+$')


@dataclass(frozen=True)
class DiagramRecord:
    """A single Mermaid diagram found in a document."""
    content: str
    index: int
    title: str
    start_line: int
    end_line: int
    raw_block: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON shape used by the browser client."""
        data = asdict(self)
        return {
            'content': data['content'],
            'index': data['index'],
            'title': data['title'],
            'startLine': data['start_line'],
            'endLine': data['end_line'],
            'rawBlock': data['raw_block']
        }


# (start_line, end_line, content, explicit_title)
_Block = Tuple[int, int, str, Optional[str]]


class DiagramBlockExtractor:
    """Extracts Mermaid code blocks from Markdown text."""

    def __init__(self, config: Optional[Config] = None):
        """Initialize extractor with configuration."""
        self.config = config or Config()
        tags = '|'.join(re.escape(tag) for tag in self.config.DIAGRAM_FENCE_TAGS)
        self.fence_open = re.compile(r'^\s*```(?:' + tags + r')(?:\s+(.+?))?\s*$')

    def extract(self, markdown: str) -> List[DiagramRecord]:
        """
        Extract all Mermaid diagrams with titles and line provenance.

        Args:
            markdown: Markdown document text

        Returns:
            Diagram records in document order, indexed from 0
        """
        lines = markdown.split('\n')
        records = []

        for index, (start, end, content, title) in enumerate(self._scan_blocks(lines)):
            if title is None:
                title = self.infer_title(lines, start)
            if title is None:
                title = f"Diagram {index + 1}"

            records.append(DiagramRecord(
                content=content,
                index=index,
                title=title,
                start_line=start,
                end_line=end,
                raw_block='\n'.join(lines[start:end + 1])
            ))

        return records

    def extract_raw(self, markdown: str) -> List[str]:
        """Extract only the trimmed diagram bodies."""
        return [content for _, _, content, _ in self._scan_blocks(markdown.split('\n'))]

    def infer_title(self, lines: List[str], fence_line: int) -> Optional[str]:
        """
        Look upward from a fence for a heading to use as the diagram title.

        The nearest qualifying heading wins. Blank lines are skipped and any
        other content line ends the search.
        """
        lower = max(0, fence_line - self.config.TITLE_LOOKBACK_LINES)

        for j in range(fence_line - 1, lower - 1, -1):
            text = lines[j].strip()
            if not text:
                continue

            heading = ATX_HEADING.match(text)
            if heading:
                return heading.group(1)

            if SETEXT_UNDERLINE.match(lines[j + 1].strip()):
                return text

            # Underline of a Setext pair; the heading text is the next line up
            if SETEXT_UNDERLINE.match(text) and j > lower and self._is_setext_text(lines[j - 1]):
                continue

            break

        return None

    def _is_setext_text(self, line: str) -> bool:
        text = line.strip()
        return bool(text) and not SETEXT_UNDERLINE.match(text)

    def _scan_blocks(self, lines: List[str]) -> List[_Block]:
        """Single pass over the lines collecting non-empty diagram blocks."""
        blocks = []
        inside = False
        block_start = -1
        block_title = None
        buffer = []

        for i, line in enumerate(lines):
            if not inside:
                match = self.fence_open.match(line)
                if match:
                    inside = True
                    block_start = i
                    block_title = (match.group(1) or '').strip() or None
                    buffer = []
            elif FENCE_CLOSE.match(line):
                content = '\n'.join(buffer).strip()
                if content:
                    blocks.append((block_start, i, content, block_title))
                inside = False
                block_title = None
                buffer = []
            else:
                buffer.append(line)

        # Unterminated block runs to the end of the document
        if inside:
            content = '\n'.join(buffer).strip()
            if content:
                blocks.append((block_start, len(lines) - 1, content, block_title))

        return blocks


_default_extractor = DiagramBlockExtractor()


def extract_diagrams(markdown: str) -> List[DiagramRecord]:
    """Extract diagram records using the default configuration."""
    return _default_extractor.extract(markdown)


def extract_raw(markdown: str) -> List[str]:
    """Extract diagram bodies using the default configuration."""
    return _default_extractor.extract_raw(markdown)
