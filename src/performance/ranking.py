"""Top-K selection of products and customers by revenue.

Equal revenues are ordered by entity id ascending, so the selection never
depends on the storage's row order.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Callable, Iterable, Mapping

DEFAULT_TOP_N = 5


def _rank_key(entity_id, revenue: Decimal):
    return (-revenue, str(entity_id))


def rank_ids(revenue_by_id: Mapping, k: int = DEFAULT_TOP_N) -> list:
    ordered = sorted(revenue_by_id.items(), key=lambda item: _rank_key(item[0], item[1]))
    return [entity_id for entity_id, _ in ordered[:max(k, 0)]]


def top_n(
    revenue_by_id: Mapping,
    lookup: Callable[[list], Iterable[Mapping]],
    k: int = DEFAULT_TOP_N,
) -> list[dict]:
    """Return the ``k`` best entities joined with their display metadata.

    ``lookup`` receives the selected ids and returns metadata mappings
    carrying an ``id`` key, in any order.
    """
    selected = rank_ids(revenue_by_id, k)
    if not selected:
        return []
    revenue_by_str_id = {str(entity_id): revenue_by_id[entity_id] for entity_id in selected}
    joined = []
    for meta in lookup(selected):
        entity_id = str(meta["id"])
        if entity_id not in revenue_by_str_id:
            continue
        joined.append({**meta, "id": entity_id, "revenue": revenue_by_str_id[entity_id]})
    joined.sort(key=lambda entry: _rank_key(entry["id"], entry["revenue"]))
    return joined
