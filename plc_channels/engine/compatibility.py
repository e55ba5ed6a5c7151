"""Signal type compatibility between PLC cards and I/O points."""

from typing import Dict, FrozenSet, Optional

from ..models import SignalType


# Card signal type -> point signal types the card accepts.
# Every SignalType member must have a row.
SIGNAL_COMPATIBILITY: Dict[SignalType, FrozenSet[SignalType]] = {
    SignalType.MA_4_20: frozenset({SignalType.MA_4_20, SignalType.HART, SignalType.ANALOG}),
    SignalType.HART: frozenset({SignalType.MA_4_20, SignalType.HART}),
    SignalType.DIGITAL: frozenset({SignalType.DIGITAL, SignalType.DRY_CONTACT, SignalType.VDC_24}),
    SignalType.RTD: frozenset({SignalType.RTD}),
    SignalType.THERMOCOUPLE: frozenset({SignalType.THERMOCOUPLE}),
    SignalType.VDC_24: frozenset({SignalType.VDC_24, SignalType.DIGITAL}),
    SignalType.DRY_CONTACT: frozenset({SignalType.DRY_CONTACT, SignalType.DIGITAL}),
    SignalType.ANALOG: frozenset({SignalType.ANALOG, SignalType.MA_4_20, SignalType.HART}),
}


def is_signal_compatible(
    card_signal: Optional[SignalType],
    point_signal: Optional[SignalType]
) -> bool:
    """
    Check whether a card's signal type accepts a point's signal type.

    The relation is asymmetric: a 4-20mA card accepts a HART point, but
    the inverse pairing is looked up under the HART row. A missing signal
    type on either side is treated as compatible, since the I/O type is
    the binding constraint.

    Args:
        card_signal: Signal type of the card (may be None)
        point_signal: Signal type of the point (may be None)

    Returns:
        True if the point may be wired to the card
    """
    if card_signal is None or point_signal is None:
        return True
    if card_signal == point_signal:
        return True
    return point_signal in SIGNAL_COMPATIBILITY[card_signal]


def accepted_signal_types(card_signal: Optional[SignalType]) -> FrozenSet[SignalType]:
    """Point signal types a card accepts (all of them for an unset card signal)."""
    if card_signal is None:
        return frozenset(SignalType)
    return SIGNAL_COMPATIBILITY[card_signal]


def describe_accepted(card_signal: Optional[SignalType]) -> str:
    """Comma separated list of accepted signal types, in enum order."""
    accepted = accepted_signal_types(card_signal)
    return ", ".join(s.value for s in SignalType if s in accepted)
