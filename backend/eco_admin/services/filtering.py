"""
Client-side text filter shared by the list views.

A row is kept when the query is a case-insensitive substring of at least one
designated field. Absent fields never match. An empty query keeps every row.
"""
from typing import Iterable, List, Mapping, Sequence


def matches(row: Mapping, query: str, fields: Sequence[str]) -> bool:
    needle = (query or "").casefold()
    if not needle:
        return True
    for field in fields:
        value = row.get(field)
        if value is None:
            continue
        if needle in str(value).casefold():
            return True
    return False


def filter_rows(rows: Iterable[Mapping], query: str, fields: Sequence[str]) -> List[Mapping]:
    return [row for row in rows if matches(row, query, fields)]
