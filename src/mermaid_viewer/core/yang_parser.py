"""
YANG Model Parsing

Parses uploaded YANG modules with pyang and summarizes them for the viewer:
the module header, its imports, includes and revisions, and the tree of
data nodes. Problems pyang reports are returned per file with line numbers
instead of being raised.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional, Tuple

from pyang import context, error, repository


DATA_KEYWORDS = (
    'container', 'list', 'leaf', 'leaf-list', 'choice', 'case', 'anydata',
    'anyxml', 'rpc', 'action', 'notification', 'input', 'output'
)

# Substatements copied verbatim into a node's properties
NODE_PROPERTIES = ('type', 'default', 'units', 'status')


@dataclass
class YangParseResult:
    """Outcome of parsing one YANG file."""
    filename: str
    valid: bool
    modules: List[Dict[str, Any]] = field(default_factory=list)
    errors: List[Dict[str, Any]] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the module tree keyed by module name."""
        return {
            'filename': self.filename,
            'valid': self.valid,
            'tree': {module['name']: module for module in self.modules},
            'modules': self.modules,
            'errors': self.errors,
            'metadata': self.metadata,
            'parser': 'pyang'
        }


class YangParser:
    """Parses and validates YANG modules."""

    def parse(self, content: str, filename: str = "temp.yang") -> YangParseResult:
        """Parse a single YANG file."""
        return self.parse_many([(filename, content)])[0]

    def parse_many(self, files: List[Tuple[str, str]]) -> List[YangParseResult]:
        """
        Parse several YANG files together.

        All files share one pyang context, so an import of a module that is
        defined by another file in the batch resolves against it.

        Args:
            files: (filename, content) pairs

        Returns:
            One YangParseResult per input file, in input order
        """
        ctx = context.Context(repository.FileRepository("", use_env=False))
        modules = [ctx.add_module(filename, content, in_format="yang") for filename, content in files]
        ctx.validate()

        errors_by_file: Dict[str, List[Dict[str, Any]]] = {}
        for position, tag, args in ctx.errors:
            level = error.err_level(tag)
            errors_by_file.setdefault(position.ref, []).append({
                'line': position.line,
                'message': error.err_to_str(tag, args),
                'severity': 'warning' if error.is_warning(level) else 'error'
            })

        results = []
        for (filename, _), module in zip(files, modules):
            errors = errors_by_file.get(filename, [])
            if module is None and not errors:
                errors = [{'line': 1, 'message': "Failed to parse YANG model", 'severity': 'error'}]

            result = YangParseResult(
                filename=filename,
                valid=module is not None and all(e['severity'] != 'error' for e in errors),
                errors=errors,
                metadata=self._metadata(filename, module)
            )
            if module is not None:
                result.modules.append({
                    'type': module.keyword,
                    'name': module.arg,
                    'namespace': result.metadata['namespace'],
                    'prefix': result.metadata['prefix'],
                    'children': [self._node(child) for child in self._data_children(module)]
                })
            results.append(result)

        return results

    def _metadata(self, filename: str, module) -> Dict[str, Any]:
        metadata = {
            'filename': filename,
            'imports': [],
            'includes': [],
            'revisions': [],
            'namespace': None,
            'prefix': None
        }
        if module is None:
            return metadata

        metadata['imports'] = [stmt.arg for stmt in module.search('import')]
        metadata['includes'] = [stmt.arg for stmt in module.search('include')]
        metadata['revisions'] = [stmt.arg for stmt in module.search('revision')]
        metadata['namespace'] = _argument(module, 'namespace')

        # Submodules name their parent's prefix under belongs-to
        belongs_to = module.search_one('belongs-to')
        metadata['prefix'] = _argument(belongs_to or module, 'prefix')

        return metadata

    def _data_children(self, stmt) -> list:
        children = getattr(stmt, 'i_children', None)
        if children is None:
            children = [s for s in stmt.substmts if s.keyword in DATA_KEYWORDS]
        return children

    def _node(self, stmt) -> Dict[str, Any]:
        node = {
            'type': stmt.keyword,
            'name': stmt.arg,
            'description': _argument(stmt, 'description'),
            'mandatory': _argument(stmt, 'mandatory') == 'true',
            'config': _argument(stmt, 'config') != 'false',
            'properties': {
                keyword: _argument(stmt, keyword)
                for keyword in NODE_PROPERTIES
                if stmt.search_one(keyword) is not None
            }
        }

        children = self._data_children(stmt)
        if children:
            node['children'] = [self._node(child) for child in children]

        return node


def _argument(stmt, keyword: str) -> Optional[str]:
    sub = stmt.search_one(keyword)
    return sub.arg if sub is not None else None


def build_dependency_graph(dependencies: Dict[str, List[str]]) -> Dict[str, List[Dict[str, str]]]:
    """Build a node/edge graph from filename -> imported module names."""
    nodes = []
    edges = []
    seen = set()

    def add_node(name: str):
        if name not in seen:
            seen.add(name)
            nodes.append({'id': name, 'label': name})

    for filename, imports in dependencies.items():
        add_node(filename)
        for imported in imports:
            add_node(imported)
            edges.append({'source': filename, 'target': imported, 'type': 'import'})

    return {'nodes': nodes, 'edges': edges}
