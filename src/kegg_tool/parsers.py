"""Parsers for KEGG flat-file entries and tab-delimited listings."""

import re
from typing import Any, Dict, List, Tuple

# A parsed flat-file entry; see parse_entry
Record = Dict[str, Any]
# Ordered identifier -> description mapping; see parse_listing
Listing = Dict[str, str]

# Tags occupy the first 12 columns of every tagged line
TAG_WIDTH = 12
TERMINATOR = '///'

SCALAR_TAGS = {
    'NAME', 'DEFINITION', 'FORMULA', 'DESCRIPTION', 'CLASS', 'EQUATION',
    'EXACT_MASS', 'MOL_WEIGHT', 'ORGANISM', 'POSITION', 'SYMBOL', 'REMARK',
}
KEYED_TAGS = {'PATHWAY', 'GENE', 'COMPOUND', 'REACTION', 'ORTHOLOGY'}

_KEYED_VALUE = re.compile(r'(\S+)\s+(.+)')
_DBLINK_VALUE = re.compile(r'(\S+):\s+(.+)')


def parse_entry(text: str) -> Record:
    """Parse one KEGG flat-file entry into a record dictionary.

    Only the first line of each tag is read. Untagged continuation lines
    and tags outside the recognised set are skipped, and nothing after a
    ``///`` line is looked at. Keyed lines (PATHWAY, GENE, ...) need an
    identifier and a description. Malformed input yields a smaller record,
    never an exception.

    >>> parse_entry("ENTRY       C00031            Compound\\nNAME        D-Glucose\\nFORMULA     C6H12O6\\n///\\n")
    {'entry': 'C00031', 'type': 'Compound', 'name': 'D-Glucose', 'formula': 'C6H12O6'}
    """
    record: Record = {}

    for line in text.splitlines():
        if line.rstrip() == TERMINATOR:
            break
        if not line or line[0].isspace():
            continue

        tag = line.split(None, 1)[0]
        value = line[TAG_WIDTH:].strip()

        if tag == 'ENTRY':
            parts = line.split()
            if len(parts) > 1:
                record['entry'] = parts[1]
            if len(parts) > 2:
                record['type'] = parts[2]
        elif tag in SCALAR_TAGS:
            record[tag.lower()] = value
        elif tag in KEYED_TAGS:
            match = _KEYED_VALUE.match(value)
            if match:
                record.setdefault(tag.lower(), {})[match.group(1)] = match.group(2).strip()
        elif tag == 'DBLINKS':
            match = _DBLINK_VALUE.match(value)
            if match:
                record.setdefault('dblinks', {})[match.group(1)] = match.group(2).split()

    return record


def parse_pairs(text: str) -> List[Tuple[str, str]]:
    """Split tab-delimited KEGG list output into (identifier, rest) pairs.

    Lines without a tab, or starting with one, are dropped. Repeated
    identifiers are all kept, in input order.
    """
    pairs = []

    for line in text.split('\n'):
        if not line.strip():
            continue
        tab_index = line.find('\t')
        if tab_index > 0:
            pairs.append((line[:tab_index], line[tab_index + 1:]))

    return pairs


def parse_listing(text: str) -> Listing:
    """Parse tab-delimited KEGG list output into an ordered mapping.

    A repeated identifier keeps its first position and its last description.
    """
    return dict(parse_pairs(text))
