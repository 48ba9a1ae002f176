"""Decorative "compared with other users" figures for the Wrapped screen.

These numbers are not backed by any aggregate data. They are random on
purpose and must not feed into any calculation.
"""

import random
from typing import Dict, Optional


def top_category_comparison(rng: Optional[random.Random] = None) -> int:
    """Percentage of "other users" said to spend less in the top category."""
    return (rng or random).randint(60, 85)


def spending_comparison(rng: Optional[random.Random] = None) -> int:
    """Percentage of "other users" said to spend more overall."""
    return (rng or random).randint(45, 75)


def comparisons(rng: Optional[random.Random] = None) -> Dict[str, int]:
    return {
        'top_category_comparison': top_category_comparison(rng),
        'spending_comparison': spending_comparison(rng),
    }
