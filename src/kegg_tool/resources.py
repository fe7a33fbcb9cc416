"""Resolution of ``kegg://`` resource URIs."""

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Pattern
from urllib.parse import unquote

from . import endpoints
from .errors import InvalidAddress, RemoteCallFailure
from .gateway import KEGGGateway
from .logging_config import get_logger
from .parsers import parse_entry, parse_listing

logger = get_logger('resources')

MIME_TYPE = 'application/json'


@dataclass(frozen=True)
class ResourcePattern:
    """One addressable resource shape."""
    resource: str
    uri_template: str
    name: str
    description: str
    regex: Pattern
    kind: str  # 'entry' or 'search'
    # Prefix added to the captured id before the get call
    entry_prefix: str = ''

    def template_entry(self) -> Dict[str, str]:
        return {
            'uriTemplate': self.uri_template,
            'name': self.name,
            'mimeType': MIME_TYPE,
            'description': self.description,
        }


def _entry_pattern(resource: str, placeholder: str, name: str, description: str,
                   entry_prefix: str = '') -> ResourcePattern:
    return ResourcePattern(
        resource=resource,
        uri_template=f'kegg://{resource}/{placeholder}',
        name=name,
        description=description,
        regex=re.compile(rf'^kegg://{resource}/(.+)$'),
        kind='entry',
        entry_prefix=entry_prefix,
    )


RESOURCE_PATTERNS: List[ResourcePattern] = [
    _entry_pattern('pathway', '{pathway_id}', 'KEGG pathway information',
                   'Complete pathway information including genes, compounds, and reactions'),
    _entry_pattern('gene', '{org}:{gene_id}', 'KEGG gene entry',
                   'Gene information including sequences, pathways, and orthology'),
    _entry_pattern('compound', '{compound_id}', 'KEGG compound entry',
                   'Chemical compound information including structure and reactions'),
    _entry_pattern('reaction', '{reaction_id}', 'KEGG reaction entry',
                   'Biochemical reaction information including equation and enzymes'),
    _entry_pattern('disease', '{disease_id}', 'KEGG disease entry',
                   'Disease information including associated genes and pathways'),
    _entry_pattern('drug', '{drug_id}', 'KEGG drug entry',
                   'Drug information including targets and interactions'),
    _entry_pattern('organism', '{org_code}', 'KEGG organism information',
                   'Organism information and statistics', entry_prefix='gn:'),
    ResourcePattern(
        resource='search',
        uri_template='kegg://search/{database}/{query}',
        name='KEGG search results',
        description='Search results for the specified database and query',
        regex=re.compile(r'^kegg://search/([^/]+)/(.+)$'),
        kind='search',
    ),
]


@dataclass
class ResourceContents:
    """Payload of a resolved resource."""
    uri: str
    data: Dict[str, Any]
    mime_type: str = MIME_TYPE


class ResourceResolver:
    """Maps resource URIs onto KEGG get/find calls."""

    def __init__(self, gateway: KEGGGateway, patterns: Optional[List[ResourcePattern]] = None):
        self.gateway = gateway
        self.patterns = patterns if patterns is not None else RESOURCE_PATTERNS

    def templates(self) -> List[Dict[str, str]]:
        return [pattern.template_entry() for pattern in self.patterns]

    def resolve(self, uri: str) -> ResourceContents:
        """Resolve ``uri`` to parsed KEGG data.

        Raises:
            InvalidAddress: ``uri`` matches no resource pattern
            RemoteCallFailure: the underlying KEGG call failed
        """
        for pattern in self.patterns:
            match = pattern.regex.match(uri)
            if not match:
                continue
            if pattern.kind == 'search':
                return ResourceContents(uri, self._search(match.group(1), unquote(match.group(2))))
            return ResourceContents(uri, self._entry(pattern, match.group(1)))

        raise InvalidAddress(f"Invalid URI format: {uri}")

    def _entry(self, pattern: ResourcePattern, entry_id: str) -> Dict[str, Any]:
        entry = f"{pattern.entry_prefix}{entry_id}"
        logger.debug(f"Resolving {pattern.uri_template} -> {entry}")
        try:
            return parse_entry(self.gateway.fetch_text(endpoints.get_path(entry)))
        except RemoteCallFailure as e:
            raise RemoteCallFailure(
                f"Failed to fetch {pattern.resource} {entry_id}: {e}",
                endpoint=e.endpoint, status_code=e.status_code,
            ) from e

    def _search(self, database: str, query: str) -> Dict[str, Any]:
        try:
            results = parse_listing(self.gateway.fetch_text(endpoints.find_path(database, query)))
        except RemoteCallFailure as e:
            raise RemoteCallFailure(
                f"Failed to search {database} for {query}: {e}",
                endpoint=e.endpoint, status_code=e.status_code,
            ) from e
        return {'search_results': results, 'query': query, 'database': database}
