"""
Program Derived Address (PDA) derivation.

A PDA is accepted only when it is not a valid ed25519 point. Off-curve
addresses have no private key, so only the owning program can sign for them.
"""

from collections.abc import Sequence
from typing import Final, NamedTuple

from solders.pubkey import Pubkey

from core.errors import DerivationFailure, NoValidBumpFound
from utils.logger import get_logger

logger = get_logger(__name__)

MAX_SEED_LEN: Final[int] = 32
MAX_SEEDS: Final[int] = 16


class DerivedAddress(NamedTuple):
    """A derived address together with the bump that produced it."""

    address: Pubkey
    bump: int


def _check_seeds(seeds: Sequence[bytes]) -> None:
    # the bump byte counts as one seed
    if len(seeds) >= MAX_SEEDS:
        raise DerivationFailure(f"Too many seeds: {len(seeds)} (max {MAX_SEEDS - 1})")
    for i, seed in enumerate(seeds):
        if len(seed) > MAX_SEED_LEN:
            raise DerivationFailure(
                f"Seed #{i} is {len(seed)} bytes, max is {MAX_SEED_LEN}"
            )


def create_program_address(
    seeds: Sequence[bytes], bump: int, owner_program: Pubkey
) -> Pubkey | None:
    """Try one bump candidate.

    Returns:
        The candidate address, or None if it lands on the curve
    """
    try:
        return Pubkey.create_program_address([*seeds, bytes([bump])], owner_program)
    except Exception:
        # solders raises its unexported PubkeyError for on-curve candidates;
        # seed limits were already checked
        return None


def derive(seeds: Sequence[bytes], owner_program: Pubkey) -> DerivedAddress:
    """Derive the canonical PDA for seeds under owner_program.

    Bumps are tried from 255 down to 0 and the first off-curve candidate wins,
    which makes the result a pure function of its inputs.

    Args:
        seeds: Ordered seed byte strings
        owner_program: Program that controls the derived address

    Returns:
        DerivedAddress with the address and its bump

    Raises:
        DerivationFailure: If the seeds are malformed
        NoValidBumpFound: If all 256 candidates are on the curve
    """
    seeds = [bytes(seed) for seed in seeds]
    _check_seeds(seeds)

    for bump in range(255, -1, -1):
        address = create_program_address(seeds, bump, owner_program)
        if address is not None:
            return DerivedAddress(address, bump)

    logger.error(f"No valid bump for seeds under {owner_program}")
    raise NoValidBumpFound(seeds, owner_program)


class SeedDeriver:
    """Memoizing wrapper around derive() scoped to a single transaction build.

    Do not share one instance across builds; create a fresh one per build.
    """

    def __init__(self):
        self._cache: dict[tuple[tuple[bytes, ...], Pubkey], DerivedAddress] = {}

    def derive(self, seeds: Sequence[bytes], owner_program: Pubkey) -> DerivedAddress:
        """Derive (or recall) the PDA for seeds under owner_program."""
        key = (tuple(bytes(seed) for seed in seeds), owner_program)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        result = derive(key[0], owner_program)
        self._cache[key] = result
        return result

    def __len__(self) -> int:
        return len(self._cache)
