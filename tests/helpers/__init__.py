"""Test helpers module for shared test utilities.

- constants: Asset and holder addresses
- factories: Pool construction and funding helpers
"""

from tests.helpers.constants import ALICE, BOB, CAROL, CUSTODY, MALLORY, TOKEN_A, TOKEN_B, TOKEN_C
from tests.helpers.factories import fund, make_pool, seed

__all__ = [
    # Constants
    "TOKEN_A",
    "TOKEN_B",
    "TOKEN_C",
    "ALICE",
    "BOB",
    "CAROL",
    "MALLORY",
    "CUSTODY",
    # Factories
    "make_pool",
    "fund",
    "seed",
]
