import itertools
from typing import Dict, Any

# This file holds the in-memory product store.

PRODUCTS: Dict[int, Dict[str, Any]] = {}
_IDS = itertools.count(1)


def next_id() -> int:
    return next(_IDS)


def reset_store():
    global _IDS
    PRODUCTS.clear()
    _IDS = itertools.count(1)
