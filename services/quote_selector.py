"""
services/quote_selector.py
--------------------------
Chooses the next quote for a subscriber without repeating their
recent history whenever the catalog allows it.
"""

import random
from typing import Sequence

from models.quote import QuoteEntry
from models.user import User
from utils.errors import EmptyCatalogError


def select_quote(catalog: Sequence[QuoteEntry], user: User, rng: random.Random | None = None) -> QuoteEntry:
    """
    Pick a random quote the user has not received recently.

    Once every quote is in the user's history, the pick falls back to the
    whole catalog and repeats are allowed.

    Raises:
        EmptyCatalogError: If `catalog` is empty.
    """
    if not catalog:
        raise EmptyCatalogError("Cannot select a quote from an empty catalog")

    rng = rng or random
    recent = set(user.recent_quotes)
    available = [entry for entry in catalog if entry.identifier not in recent]
    return rng.choice(available or list(catalog))
