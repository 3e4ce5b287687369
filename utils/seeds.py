"""
Seed initialization utilities for reproducible searches.
"""

import logging
import random
from typing import Optional

logger = logging.getLogger(__name__)


def make_rng(seed: Optional[int], log: bool = True) -> random.Random:
    """
    Create the generator threaded through every random choice of a search.

    Args:
        seed: Random seed (None draws one from the OS so the run can be repeated)
        log: Whether to log the seed value

    Returns:
        Seeded random.Random instance
    """
    if seed is None:
        seed = random.SystemRandom().randrange(2**32)
        if log:
            logger.info(f"No seed provided, generated seed: {seed}")
    elif log:
        logger.info(f"Seed initialized: {seed}")
    return random.Random(seed)
