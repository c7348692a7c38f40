"""Configuration parameters for diagram extraction and validation."""

import os
from typing import Dict, Any


class Config:
    """Configuration class for diagram extraction parameters."""

    # Fence tags accepted as Mermaid blocks (synonyms)
    DIAGRAM_FENCE_TAGS = ('mermaid', 'mmd')

    # Heading lookback above an untitled fence
    TITLE_LOOKBACK_LINES = 5

    # Table of contents level used for diagram entries
    TOC_DIAGRAM_LEVEL = 4

    # File types
    MARKDOWN_EXTENSIONS = ('.md',)
    MERMAID_EXTENSIONS = ('.mmd', '.mermaid')
    YANG_EXTENSIONS = ('.yang',)

    # CLI output
    OUTPUT_EXTENSION = os.getenv('MERMAID_OUTPUT_EXTENSION', '.mmd')
    MANIFEST_NAME = os.getenv('MERMAID_MANIFEST_NAME', 'manifest.json')

    # Leading keyword -> diagram type name
    DIAGRAM_KEYWORDS = {
        'graph': 'flowchart',
        'flowchart': 'flowchart',
        'flowchart-elk': 'flowchart',
        'sequenceDiagram': 'sequenceDiagram',
        'classDiagram': 'classDiagram',
        'classDiagram-v2': 'classDiagram',
        'stateDiagram': 'stateDiagram',
        'stateDiagram-v2': 'stateDiagram',
        'erDiagram': 'erDiagram',
        'journey': 'journey',
        'gantt': 'gantt',
        'pie': 'pie',
        'quadrantChart': 'quadrantChart',
        'requirementDiagram': 'requirementDiagram',
        'gitGraph': 'gitgraph',
        'gitgraph': 'gitgraph',
        'C4Context': 'c4',
        'C4Container': 'c4',
        'C4Component': 'c4',
        'C4Dynamic': 'c4',
        'C4Deployment': 'c4',
        'mindmap': 'mindmap',
        'timeline': 'timeline',
        'sankey-beta': 'sankey',
        'xychart-beta': 'xyChart',
        'xyChart-beta': 'xyChart',
        'block-beta': 'block',
        'packet-beta': 'packet',
        'architecture-beta': 'architecture',
    }

    FLOWCHART_DIRECTIONS = ('TB', 'TD', 'BT', 'RL', 'LR')

    @classmethod
    def supported_types(cls) -> list:
        """Distinct diagram type names, in declaration order."""
        return list(dict.fromkeys(cls.DIAGRAM_KEYWORDS.values()))

    @classmethod
    def file_type(cls, extension: str) -> str:
        """Map a file extension to the client-facing file type."""
        ext = extension.lower()
        if ext in cls.MARKDOWN_EXTENSIONS:
            return 'markdown'
        if ext in cls.YANG_EXTENSIONS:
            return 'yang'
        return 'mermaid'

    @classmethod
    def to_dict(cls) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            'diagram_fence_tags': list(cls.DIAGRAM_FENCE_TAGS),
            'title_lookback_lines': cls.TITLE_LOOKBACK_LINES,
            'toc_diagram_level': cls.TOC_DIAGRAM_LEVEL,
            'allowed_extensions': list(
                cls.MARKDOWN_EXTENSIONS + cls.MERMAID_EXTENSIONS + cls.YANG_EXTENSIONS
            ),
            'output_extension': cls.OUTPUT_EXTENSION,
            'supported_types': cls.supported_types()
        }
