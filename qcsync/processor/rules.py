"""
Rules for turning order metafields into the D-G column values.
"""

from typing import Mapping, Tuple


# Metafield keys, in output column order (D, E, F, G)
PACKING_SLIP_NOTES_KEY = "custom.packing_slip_notes"
WHO_CONTACTS_KEY = "custom.who_contacts"
SHIP_INSTALL_PICKUP_KEY = "custom.ship_install_pickup"
PIF_OR_NOT_KEY = "custom.pif_or_not"

OUTPUT_KEYS = (
    PACKING_SLIP_NOTES_KEY,
    WHO_CONTACTS_KEY,
    SHIP_INSTALL_PICKUP_KEY,
    PIF_OR_NOT_KEY,
)


def packing_slip_notes_from_third_line(value: str) -> str:
    """
    Keep the packing slip notes from the third line onwards.

    The notes metafield is written as a label on line 1, a blank line 2,
    then the actual notes. With two lines or fewer there are no notes.

    Args:
        value: Raw metafield value

    Returns:
        Lines 3.. joined with newlines, trailing whitespace removed
    """
    lines = (value or "").split("\n")
    if len(lines) <= 2:
        return ""
    return "\n".join(lines[2:]).rstrip()


def transform_metafields(metafields: Mapping[str, str]) -> Tuple[str, str, str, str]:
    """Return (packing slip notes, who contacts, ship/install/pickup, PIF) for columns D-G."""
    notes = packing_slip_notes_from_third_line(metafields.get(PACKING_SLIP_NOTES_KEY) or "")
    who = (metafields.get(WHO_CONTACTS_KEY) or "").strip()
    ship = (metafields.get(SHIP_INSTALL_PICKUP_KEY) or "").strip()
    pif = (metafields.get(PIF_OR_NOT_KEY) or "").strip()
    return notes, who, ship, pif
