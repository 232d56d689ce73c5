from typing import Iterable

from models.summary import Suggestion
from models.transaction import Transaction
from utils.constants import SUGGESTION_LIMIT, SUGGESTION_MIN_CHARS


def suggest(
    transactions: Iterable[Transaction],
    partial: str,
    limit: int = SUGGESTION_LIMIT,
) -> list[Suggestion]:
    """Rank earlier transactions whose description contains `partial`.

    Matching is case-insensitive and skips exact matches of the input.
    Matches are grouped by (description, category, |amount|); the most
    frequent groups come first, ties in the order they were first seen.
    Each suggestion carries the fields of the group's first transaction.
    """
    if len(partial) < SUGGESTION_MIN_CHARS:
        return []
    needle = partial.lower()

    groups: dict[tuple, list] = {}
    for tx in transactions:
        text = tx.description.lower()
        if needle not in text or text == needle:
            continue
        key = (tx.description, tx.category, tx.magnitude)
        if key in groups:
            groups[key][1] += 1
        else:
            groups[key] = [tx, 1]

    ranked = sorted(groups.values(), key=lambda g: g[1], reverse=True)
    return [
        Suggestion(
            description=tx.description,
            amount=tx.amount,
            type=tx.type,
            category=tx.category,
            payment=tx.payment,
            count=count,
        )
        for tx, count in ranked[:limit]
    ]
