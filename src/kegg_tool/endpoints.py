"""Path builders for the KEGG REST verbs.

Every remote call in the package goes through one of these, so the path
shapes live in one place::

    /info/<database>
    /list/<database>
    /find/<database>/<query>[/<option>]
    /get/<entry>[/<option>]
    /conv/<target_db>/<source>
    /link/<target_db>/<source>
    /ddi/<entry>[+<entry>...]
"""

from typing import Iterable, Optional
from urllib.parse import quote

# Characters encodeURIComponent leaves untouched besides quote()'s defaults
_COMPONENT_SAFE = "!'()*"


def encode_query(query: str) -> str:
    """Percent-encode a free-text query as a single path segment."""
    return quote(query, safe=_COMPONENT_SAFE)


def join_entries(entries: Iterable[str]) -> str:
    """Join identifiers the way KEGG expects multi-entry requests."""
    return '+'.join(entries)


def info_path(database: str) -> str:
    return f"/info/{database}"


def list_path(database: str) -> str:
    return f"/list/{database}"


def find_path(database: str, query: str, option: Optional[str] = None) -> str:
    path = f"/find/{database}/{encode_query(query)}"
    if option:
        path += f"/{option}"
    return path


def get_path(entry: str, option: Optional[str] = None) -> str:
    path = f"/get/{entry}"
    if option:
        path += f"/{option}"
    return path


def conv_path(target_db: str, source: str) -> str:
    return f"/conv/{target_db}/{source}"


def link_path(target_db: str, source: str) -> str:
    return f"/link/{target_db}/{source}"


def ddi_path(entries: Iterable[str]) -> str:
    return f"/ddi/{join_entries(entries)}"
