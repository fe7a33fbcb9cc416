"""CLI utility functions and helpers."""

import json
from typing import AbstractSet, Any, Dict, Iterable, Optional

import click

# Global flag for quiet mode
_quiet_mode = False


def set_quiet_mode(quiet: bool) -> None:
    """Set the global quiet mode flag."""
    global _quiet_mode
    _quiet_mode = quiet


def echo(message: str = "", err: bool = False, **kwargs) -> None:
    """Echo wrapper that respects quiet mode."""
    if _quiet_mode and not err:
        return
    click.echo(message, err=err, **kwargs)


def parse_arguments(args_json: Optional[str], pairs: Iterable[str],
                    text_arguments: AbstractSet[str] = frozenset()) -> Dict[str, Any]:
    """Build an argument bag from ``--args`` JSON and ``--arg key=value`` pairs.

    Pair values for keys in ``text_arguments`` stay verbatim strings, so
    ``query=180.06`` is still a query. Other pair values are read as JSON
    when they parse (numbers, booleans, lists) and kept as strings otherwise.
    """
    arguments: Dict[str, Any] = {}

    if args_json:
        try:
            loaded = json.loads(args_json)
        except json.JSONDecodeError as e:
            raise click.BadParameter(f"not valid JSON: {e}", param_hint='--args')
        if not isinstance(loaded, dict):
            raise click.BadParameter("must be a JSON object", param_hint='--args')
        arguments.update(loaded)

    for pair in pairs:
        key, sep, raw = pair.partition('=')
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got {pair!r}", param_hint='--arg')
        if key in text_arguments:
            arguments[key] = raw
            continue
        try:
            arguments[key] = json.loads(raw)
        except json.JSONDecodeError:
            arguments[key] = raw

    return arguments
