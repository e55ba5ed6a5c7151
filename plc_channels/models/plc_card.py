"""PLC card data model."""

import math
from dataclasses import dataclass
from typing import Optional, Any, Dict, NamedTuple, TYPE_CHECKING

if TYPE_CHECKING:
    from .io_point import IOType, SignalType


class CardLocation(NamedTuple):
    """Identity of a card within a snapshot: (controller, rack, slot)."""
    plc_name: str
    rack: int
    slot: int

    def __str__(self) -> str:
        return f"{self.plc_name} / Rack {self.rack} / Slot {self.slot}"


@dataclass(frozen=True)
class PLCCard:
    """A physical I/O module exposing a fixed number of channels of one I/O type."""

    name: str                                  # e.g., "PLC1-R0-S3"
    plc_name: str                              # Controller name
    rack: int
    slot: int
    io_type: "IOType"
    total_channels: int
    signal_type: Optional["SignalType"] = None
    card_type: Optional[str] = None            # e.g., "1756-IF16"
    manufacturer: Optional[str] = None
    part_number: Optional[str] = None

    @property
    def location(self) -> CardLocation:
        """Identity triple of this card."""
        return CardLocation(self.plc_name, self.rack, self.slot)

    @property
    def label(self) -> str:
        """Display label: name plus card type when known."""
        if self.card_type:
            return f"{self.name} ({self.card_type})"
        return self.name

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PLCCard":
        """
        Create a PLCCard from a dictionary.

        Raises:
            ValueError: If a required field is missing or cannot be parsed
        """
        from .io_point import IOType, SignalType

        def pick(*keys):
            for key in keys:
                if key in data:
                    return data[key]
            return None

        plc_name = _clean_text(pick("PLC Name", "plc_name"))
        rack = _clean_int(pick("Rack", "rack"), "rack")
        slot = _clean_int(pick("Slot", "slot"), "slot")
        io_type = IOType.from_value(pick("IO Type", "io_type"))
        total_channels = _clean_int(pick("Total Channels", "total_channels"), "total_channels")

        missing = [
            field_name for field_name, value in (
                ("plc_name", plc_name),
                ("rack", rack),
                ("slot", slot),
                ("io_type", io_type),
                ("total_channels", total_channels),
            )
            if value is None
        ]
        if missing:
            raise ValueError(f"Missing required card fields: {', '.join(missing)}")
        if total_channels <= 0:
            raise ValueError(f"Total channels must be positive, got {total_channels}")

        name = _clean_text(pick("Name", "name")) or f"{plc_name}-R{rack}-S{slot}"

        return cls(
            name=name,
            plc_name=plc_name,
            rack=rack,
            slot=slot,
            io_type=io_type,
            total_channels=total_channels,
            signal_type=SignalType.from_value(pick("Signal Type", "signal_type")),
            card_type=_clean_text(pick("Card Type", "card_type")),
            manufacturer=_clean_text(pick("Manufacturer", "manufacturer")),
            part_number=_clean_text(pick("Part Number", "part_number")),
        )


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


def _clean_text(value: Any) -> Optional[str]:
    """Normalise a spreadsheet cell to stripped text or None."""
    if _is_blank(value):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def _clean_int(value: Any, field_name: str) -> Optional[int]:
    """Normalise a spreadsheet cell to an int or None."""
    if _is_blank(value):
        return None
    if isinstance(value, bool):
        raise ValueError(f"Invalid {field_name}: {value}")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"Invalid {field_name}: {value}")
        return int(value)
    try:
        return int(str(value).strip())
    except ValueError:
        raise ValueError(f"Invalid {field_name}: {value}") from None
