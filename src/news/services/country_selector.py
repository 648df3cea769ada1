import random
from typing import List, Optional

from ...exceptions import SelectionError
from ..catalog import SiteCatalog


def select_countries(
    catalog: SiteCatalog,
    count: int,
    rng: Optional[random.Random] = None
) -> List[str]:
    """
    Pick `count` distinct countries from the catalog, uniformly at random.

    When `count` covers the whole catalog every country is returned.
    Otherwise the country names are shuffled in place (Fisher-Yates) and the
    first `count` are kept.

    Raises:
        SelectionError: when the catalog is empty or `count` is invalid
    """
    if not catalog:
        raise SelectionError("Site catalog is empty", cause="No countries configured")

    if isinstance(count, bool) or not isinstance(count, int) or count < 0:
        raise SelectionError("Invalid country count", cause=f"count must be a non-negative integer, got {count!r}")

    countries = list(catalog.keys())
    if count >= len(countries):
        return countries

    rng = rng or random.Random()
    for i in range(len(countries) - 1, 0, -1):
        j = rng.randint(0, i)
        countries[i], countries[j] = countries[j], countries[i]

    return countries[:count]
