"""Sequential result-or-error fold for batch and fan-out lookups."""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, TypeVar

from .errors import ErrorHandler, KEGGToolError
from .logging_config import ProgressLogger, get_logger

logger = get_logger('batch')

T = TypeVar('T')


@dataclass
class ItemOutcome:
    """Result of one item: either ``data`` or an ``error`` message."""
    item_id: str
    data: Optional[Any] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        if self.success:
            return {'entry_id': self.item_id, 'data': self.data, 'success': True}
        return {'entry_id': self.item_id, 'error': self.error, 'success': False}


def collect_outcomes(items: Iterable[T],
                     process_func: Callable[[T], Any],
                     operation: str,
                     item_id_func: Callable[[T], str] = str,
                     error_handler: Optional[ErrorHandler] = None) -> List[ItemOutcome]:
    """Run ``process_func`` over ``items`` one at a time.

    Every item yields exactly one ``ItemOutcome`` in input order. Failures
    raised as ``KEGGToolError`` are recorded on the outcome and the loop
    moves on; anything else propagates.
    """
    items = list(items)
    progress = ProgressLogger(logger, len(items), operation)
    outcomes: List[ItemOutcome] = []

    for item in items:
        item_id = item_id_func(item)
        try:
            data = process_func(item)
        except KEGGToolError as e:
            if error_handler is not None:
                error_handler.handle_error(e, operation, item_id=item_id)
            outcomes.append(ItemOutcome(item_id=item_id, error=str(e)))
            progress.update(success=False, item=item_id)
            continue

        outcomes.append(ItemOutcome(item_id=item_id, data=data))
        progress.update(success=True, item=item_id)

    progress.complete()
    return outcomes


def summarize(outcomes: List[ItemOutcome]) -> Dict[str, int]:
    """Count totals for a list of outcomes."""
    successful = sum(1 for outcome in outcomes if outcome.success)
    return {
        'total_entries': len(outcomes),
        'successful': successful,
        'failed': len(outcomes) - successful,
    }
