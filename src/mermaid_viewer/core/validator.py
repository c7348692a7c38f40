"""
Mermaid Syntax Validation

Lightweight structural checks for Mermaid diagram definitions: a known
diagram type declaration, balanced brackets and closed string quotes.
Full parsing is left to the browser-side renderer; these checks catch the
common mistakes before a diagram is sent there.
"""

import re
from dataclasses import dataclass, field
from typing import List, Dict, Optional, Any

from ..utils.config import Config
from .extractor import DiagramBlockExtractor


BRACKET_PAIRS = {')': '(', ']': '[', '}': '{'}

# Shapes and notations whose brackets are not meant to pair up
ER_CARDINALITY = re.compile(r'\}[|o](?=--|\.\.)|(?<=--|\.\.)[|o]\{')
ASYMMETRIC_NODE = re.compile(r'(?<=\w)>([^\]]*)\]')
UNCHECKED_TYPES = ('mindmap',)


@dataclass
class ValidationResult:
    """Outcome of validating one diagram definition."""
    is_valid: bool
    diagram_type: Optional[str] = None
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'isValid': self.is_valid,
            'diagramType': self.diagram_type,
            'errors': self.errors,
            'warnings': self.warnings
        }


SUPPORTED_DIAGRAM_TYPES = [
    {'type': 'flowchart', 'name': 'Flowchart', 'example': 'flowchart TD\nA[Start] --> B[End]'},
    {'type': 'sequenceDiagram', 'name': 'Sequence Diagram',
     'example': 'sequenceDiagram\nAlice->>Bob: Hello Bob, how are you?\nBob-->>Alice: Great!'},
    {'type': 'classDiagram', 'name': 'Class Diagram',
     'example': 'classDiagram\nclass Animal\nAnimal: +String name\nAnimal: +bark()'},
    {'type': 'stateDiagram', 'name': 'State Diagram', 'example': 'stateDiagram-v2\n[*] --> Still\nStill --> [*]'},
    {'type': 'erDiagram', 'name': 'Entity Relationship', 'example': 'erDiagram\nCUSTOMER ||--o{ ORDER : places'},
    {'type': 'journey', 'name': 'User Journey',
     'example': 'journey\ntitle My working day\nsection Go to work\nMake tea: 5: Me'},
    {'type': 'gantt', 'name': 'Gantt Chart',
     'example': 'gantt\ntitle A Gantt Diagram\nTask 1: done, des1, 2014-01-06,2014-01-08'},
    {'type': 'pie', 'name': 'Pie Chart', 'example': 'pie title Pets adopted by volunteers\n"Dogs" : 386\n"Cats" : 85'},
    {'type': 'quadrantChart', 'name': 'Quadrant Chart',
     'example': 'quadrantChart\ntitle Reach and influence\nx-axis Low Reach --> High Reach\n'
                'y-axis Low Influence --> High Influence'},
    {'type': 'requirementDiagram', 'name': 'Requirement Diagram',
     'example': 'requirementDiagram\nrequirement test_req {\nid: 1\ntext: the test text.\nrisk: high\n}'},
    {'type': 'gitgraph', 'name': 'Git Graph', 'example': 'gitGraph\ncommit\nbranch develop\ncommit'},
    {'type': 'mindmap', 'name': 'Mindmap', 'example': 'mindmap\nroot((mindmap))\nOrigins\nLong history'},
    {'type': 'timeline', 'name': 'Timeline',
     'example': 'timeline\ntitle History of Social Media Platform\n2002 : LinkedIn\n2004 : Facebook'},
    {'type': 'sankey', 'name': 'Sankey Diagram', 'example': 'sankey-beta\nA,B,10\nA,C,20\nB,D,15'},
    {'type': 'xyChart', 'name': 'XY Chart',
     'example': 'xychart-beta\ntitle "Sales Revenue"\nx-axis [jan, feb, mar]\nbar [5000, 6000, 7500]'},
    {'type': 'block', 'name': 'Block Diagram', 'example': 'block-beta\ncolumns 1\nA\nB\nC'},
    {'type': 'packet', 'name': 'Packet Diagram',
     'example': 'packet-beta\n0-15: "Source Port"\n16-31: "Destination Port"'},
    {'type': 'c4', 'name': 'C4 Context',
     'example': 'C4Context\ntitle System Context diagram\nPerson(customerA, "Banking Customer A")'},
    {'type': 'architecture', 'name': 'Architecture',
     'example': 'architecture-beta\ngroup api(cloud)[API]\nservice db(database)[Database] in api'},
]


class MermaidValidator:
    """Validates Mermaid diagram definitions."""

    def __init__(self, config: Optional[Config] = None,
                 extractor: Optional[DiagramBlockExtractor] = None):
        """Initialize validator with configuration."""
        self.config = config or Config()
        self.extractor = extractor or DiagramBlockExtractor(self.config)

    def validate(self, definition: str) -> ValidationResult:
        """
        Validate a single Mermaid definition.

        Args:
            definition: Diagram source without fence lines

        Returns:
            ValidationResult with any errors and warnings found
        """
        if not definition or not definition.strip():
            return ValidationResult(is_valid=False, errors=["Empty diagram definition"])

        lines = definition.split('\n')
        header_index = self._find_header(lines)
        if header_index is None:
            return ValidationResult(is_valid=False, errors=["Missing diagram type declaration"])

        result = ValidationResult(is_valid=True)
        header = lines[header_index].strip()
        keyword = header.split()[0]
        result.diagram_type = self.config.DIAGRAM_KEYWORDS.get(keyword)

        if result.diagram_type is None:
            result.errors.append(f"Unknown diagram type '{keyword}' on line {header_index + 1}")
        elif result.diagram_type == 'flowchart':
            parts = header.split()
            if len(parts) > 1 and parts[1] not in self.config.FLOWCHART_DIRECTIONS:
                result.warnings.append(
                    f"Unknown flowchart direction '{parts[1]}', expected one of "
                    f"{', '.join(self.config.FLOWCHART_DIRECTIONS)}"
                )

        if result.diagram_type not in UNCHECKED_TYPES:
            result.errors.extend(self._check_brackets(lines, header_index, result.diagram_type))
        result.is_valid = not result.errors
        return result

    def validate_document(self, markdown: str) -> List[Dict[str, Any]]:
        """Validate every diagram of a Markdown document independently."""
        results = []
        for diagram in self.extractor.extract(markdown):
            results.append({
                'index': diagram.index,
                'title': diagram.title,
                'startLine': diagram.start_line,
                **self.validate(diagram.content).to_dict()
            })
        return results

    def _find_header(self, lines: List[str]) -> Optional[int]:
        """Index of the first line that is not blank, a comment, or front matter."""
        in_front_matter = False
        for i, line in enumerate(lines):
            stripped = line.strip()
            if stripped == '---':
                in_front_matter = not in_front_matter
                continue
            if in_front_matter or not stripped or stripped.startswith('%%'):
                continue
            return i
        return None

    def _check_brackets(self, lines: List[str], start: int,
                        diagram_type: Optional[str]) -> List[str]:
        errors = []
        stack = []  # (bracket, line number)

        for number, line in enumerate(lines[start:], start=start + 1):
            if line.strip().startswith('%%'):
                continue
            if diagram_type == 'erDiagram':
                line = ER_CARDINALITY.sub('', line)
            elif diagram_type == 'flowchart':
                line = ASYMMETRIC_NODE.sub(r'[\1]', line)
            if line.count('"') % 2:
                errors.append(f"Unterminated string on line {number}")
                continue

            in_string = False
            for char in line:
                if char == '"':
                    in_string = not in_string
                elif in_string:
                    continue
                elif char in '([{':
                    stack.append((char, number))
                elif char in BRACKET_PAIRS:
                    if stack and stack[-1][0] == BRACKET_PAIRS[char]:
                        stack.pop()
                    else:
                        errors.append(f"Unexpected '{char}' on line {number}")

        for char, number in stack:
            errors.append(f"Unclosed '{char}' opened on line {number}")

        return errors


def supported_diagram_types() -> List[Dict[str, str]]:
    """Catalogue of supported diagram types with starter examples."""
    return [dict(entry) for entry in SUPPORTED_DIAGRAM_TYPES]
