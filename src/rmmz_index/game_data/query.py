"""
Query engine over an EntityIndex snapshot.

Filters compose as logical AND, sorting is stable and the limit is applied
last, after filtering and sorting.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .managers import EntityIndex
from .models import Record, SearchResult, record_name

_MISSING = object()


def _value_kind(value: Any) -> str:
    """Group numbers together, everything else by type name."""
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, (int, float)):
        return "number"
    return type(value).__name__


def _strict_equal(left: Any, right: Any) -> bool:
    """Equality without bool/number coercion; 1 and 1.0 are the same JSON number."""
    return _value_kind(left) == _value_kind(right) and left == right


@dataclass
class SearchOptions:
    """Predicate set for a database query.

    Every field is optional; an empty SearchOptions returns every record
    of every type in processing order.
    """

    types: Optional[List[str]] = None
    id_min: Optional[int] = None
    id_max: Optional[int] = None
    name_contains: Optional[str] = None
    has_property: Optional[str] = None
    where: Dict[str, Any] = field(default_factory=lambda: {})
    order_by: Optional[str] = None
    limit: Optional[int] = None


class QueryEngine:
    """Evaluates SearchOptions against one EntityIndex."""

    def __init__(self, index: EntityIndex):
        self.index = index

    def _matches(self, record_id: int, record: Record, options: SearchOptions) -> bool:
        if options.id_min is not None and record_id < options.id_min:
            return False
        if options.id_max is not None and record_id > options.id_max:
            return False

        if options.name_contains:
            if options.name_contains.lower() not in record_name(record).lower():
                return False

        if options.has_property and options.has_property not in record:
            return False

        for key, value in options.where.items():
            if not _strict_equal(record.get(key, _MISSING), value):
                return False

        return True

    @staticmethod
    def _sort(results: List[SearchResult], order_by: str) -> List[SearchResult]:
        """Stable sort by a record field.

        Rows lacking the field go last. When the values do not compare with
        each other, rows whose value is of the same kind as the first row's
        are sorted and the rest follow in input order.
        """
        present = [r for r in results if order_by in r.data]
        missing = [r for r in results if order_by not in r.data]

        try:
            return sorted(present, key=lambda r: r.data[order_by]) + missing
        except TypeError:
            pass

        lead_kind = _value_kind(present[0].data[order_by])
        comparable = [r for r in present if _value_kind(r.data[order_by]) == lead_kind]
        others = [r for r in present if _value_kind(r.data[order_by]) != lead_kind]
        try:
            comparable = sorted(comparable, key=lambda r: r.data[order_by])
        except TypeError:
            # Values of one kind that still do not order (e.g. dicts)
            pass

        return comparable + others + missing

    def run(self, options: SearchOptions) -> List[SearchResult]:
        """Execute a query.

        Args:
            options: Predicate set

        Returns:
            Ordered list of SearchResult rows

        Raises:
            ValueError: If the limit is negative
        """
        if options.limit is not None and options.limit < 0:
            raise ValueError(f"limit must be non-negative, got {options.limit}")

        results: List[SearchResult] = []
        for type_name, record_id, record in self.index.iter_records(options.types):
            if not self._matches(record_id, record, options):
                continue
            name = record_name(record) or f"{type_name} {record_id}"
            results.append(SearchResult(type_name, record_id, name, record))

        if options.order_by:
            results = self._sort(results, options.order_by)

        if options.limit is not None:
            results = results[: options.limit]

        return results
