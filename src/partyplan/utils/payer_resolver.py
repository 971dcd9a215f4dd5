"""Utility for resolving payer names typed by the user."""

from typing import Sequence


def resolve_payer(payers: Sequence[str], payer: str) -> str:
    """Resolve a payer name to one of the configured payers.

    Matching ignores case and surrounding whitespace.

    Args:
        payers: The configured payers
        payer: Name as typed

    Returns:
        The configured spelling of the payer

    Raises:
        ValueError: If the name matches no configured payer
    """
    wanted = payer.strip().casefold()
    for name in payers:
        if name.casefold() == wanted:
            return name
    raise ValueError(f"Invalid payer '{payer}'. Must be one of: {', '.join(payers)}")
