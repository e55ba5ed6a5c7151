"""I/O point data model for PLC channel assignment."""

from dataclasses import dataclass, replace
from typing import Optional, Any, Dict
from enum import Enum

from .plc_card import CardLocation, _clean_text, _clean_int


class IOType(Enum):
    """Hardware I/O direction."""
    AI = "AI"    # Analog Input
    AO = "AO"    # Analog Output
    DI = "DI"    # Digital Input
    DO = "DO"    # Digital Output

    @classmethod
    def from_value(cls, value: Any) -> Optional["IOType"]:
        """
        Parse an I/O type from I/O list text.

        Accepts the short codes (AI, AO, DI, DO) as well as spelled-out
        forms such as "Analog Input" or "digital_output".

        Raises:
            ValueError: If the text is not a known I/O type
        """
        if isinstance(value, cls):
            return value
        text = _clean_text(value)
        if text is None:
            return None

        key = text.upper().replace("/", "").replace("_", " ").replace("-", " ")
        key = " ".join(key.split())
        if key in cls.__members__:
            return cls[key]
        if key in _IO_TYPE_ALIASES:
            return _IO_TYPE_ALIASES[key]
        raise ValueError(f"Unknown I/O type: {value}")


_IO_TYPE_ALIASES = {
    "ANALOG INPUT": IOType.AI,
    "ANALOG OUTPUT": IOType.AO,
    "DIGITAL INPUT": IOType.DI,
    "DIGITAL OUTPUT": IOType.DO,
}


class SignalType(Enum):
    """Electrical/protocol characteristic of a point or card."""
    MA_4_20 = "4-20mA"
    HART = "HART"
    DIGITAL = "Digital"
    RTD = "RTD"
    THERMOCOUPLE = "Thermocouple"
    VDC_24 = "24VDC"
    DRY_CONTACT = "Dry Contact"
    ANALOG = "Analog"        # Generic analog

    @classmethod
    def from_value(cls, value: Any) -> Optional["SignalType"]:
        """
        Parse a signal type from I/O list text.

        Matching ignores case, spaces, hyphens and underscores, so
        "4-20 mA", "4_20MA" and "dry-contact" all resolve.

        Raises:
            ValueError: If the text is not a known signal type
        """
        if isinstance(value, cls):
            return value
        text = _clean_text(value)
        if text is None:
            return None

        key = _signal_key(text)
        for member in cls:
            if key in (_signal_key(member.value), _signal_key(member.name)):
                return member
        if key in _SIGNAL_TYPE_ALIASES:
            return _SIGNAL_TYPE_ALIASES[key]
        raise ValueError(f"Unknown signal type: {value}")


def _signal_key(text: str) -> str:
    return "".join(ch for ch in text.upper() if ch.isalnum())


_SIGNAL_TYPE_ALIASES = {
    "GENERICANALOG": SignalType.ANALOG,
    "TC": SignalType.THERMOCOUPLE,
    "DRYCONTACTS": SignalType.DRY_CONTACT,
    "24V": SignalType.VDC_24,
}


@dataclass(frozen=True)
class IOPoint:
    """A logical signal that requires one hardware channel."""

    tag: str                                 # e.g., "FT-101"
    io_type: Optional[IOType] = None         # AI, AO, DI, DO
    signal_type: Optional[SignalType] = None

    # Placement (hint or actual assignment)
    plc_name: Optional[str] = None
    rack: Optional[int] = None
    slot: Optional[int] = None
    channel: Optional[int] = None

    # Optional metadata
    description: Optional[str] = None
    terminal_block: Optional[str] = None
    notes: Optional[str] = None

    @property
    def is_assigned(self) -> bool:
        """A point is assigned only when all four placement fields are set."""
        return (
            self.plc_name is not None
            and self.rack is not None
            and self.slot is not None
            and self.channel is not None
        )

    @property
    def location(self) -> Optional[CardLocation]:
        """Card identity this point refers to, if controller/rack/slot are set."""
        if self.plc_name is None or self.rack is None or self.slot is None:
            return None
        return CardLocation(self.plc_name, self.rack, self.slot)

    def with_channel(self, channel: int) -> "IOPoint":
        """Return a copy of this point with the channel applied."""
        return replace(self, channel=channel)

    def with_placement(self, location: CardLocation, channel: int) -> "IOPoint":
        """Return a copy of this point placed on a card location and channel."""
        return replace(
            self,
            plc_name=location.plc_name,
            rack=location.rack,
            slot=location.slot,
            channel=channel,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "IOPoint":
        """
        Create an IOPoint from a dictionary.

        Accepts I/O list column headings ("Tag", "IO Type", "PLC Name", ...)
        as well as snake_case keys.

        Raises:
            ValueError: If an enum or integer field cannot be parsed
        """
        def pick(*keys):
            for key in keys:
                if key in data:
                    return data[key]
            return None

        return cls(
            tag=_clean_text(pick("Tag", "tag")) or "",
            io_type=IOType.from_value(pick("IO Type", "io_type")),
            signal_type=SignalType.from_value(pick("Signal Type", "signal_type")),
            plc_name=_clean_text(pick("PLC Name", "plc_name")),
            rack=_clean_int(pick("Rack", "rack"), "rack"),
            slot=_clean_int(pick("Slot", "slot"), "slot"),
            channel=_clean_int(pick("Channel", "channel"), "channel"),
            description=_clean_text(pick("Description", "description")),
            terminal_block=_clean_text(pick("Terminal Block", "terminal_block")),
            notes=_clean_text(pick("Notes", "notes")),
        )
