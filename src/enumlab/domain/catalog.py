"""A catalog of small enumerations and unions.

Plain enums cover cases without payloads (optionally mapped to raw
values); tagged unions cover cases that carry data. Everything here is
self-contained: no enum depends on another module's state.
"""

from __future__ import annotations

import re
from datetime import datetime
from enum import Enum, IntEnum, StrEnum, nonmember
from typing import NamedTuple

from enumlab.domain.fields import OptionalOf
from enumlab.domain.union import Field, TaggedValue, UnionType, Variant, register_union

# --- Basic cases and raw values ---


class Movement(StrEnum):
    """Four directions, no raw value beyond the name."""

    LEFT = "left"
    RIGHT = "right"
    TOP = "top"
    BOTTOM = "bottom"


class Direction(IntEnum):
    """The same four directions mapped to integers."""

    LEFT = 0
    RIGHT = 1
    TOP = 2
    BOTTOM = 3


# --- Nesting ---


class Character(StrEnum):
    """Character classes, with the equipment enums nested inside."""

    THIEF = "thief"
    WARRIOR = "warrior"
    KNIGHT = "knight"

    @nonmember
    class Weapon(StrEnum):
        BOW = "bow"
        SWORD = "sword"
        LANCE = "lance"
        DAGGER = "dagger"

    @nonmember
    class Helmet(StrEnum):
        WOODEN = "wooden"
        IRON = "iron"
        DIAMOND = "diamond"


# --- Methods and properties on cases ---


class Device(StrEnum):
    IPAD = "iPad"
    IPHONE = "iPhone"
    APPLE_TV = "AppleTV"
    APPLE_WATCH = "AppleWatch"

    @property
    def year(self) -> int:
        return _DEVICE_YEARS[self]

    def introduced(self) -> str:
        return f"{self} was introduced {self.year}"

    @classmethod
    def from_slang(cls, term: str) -> Device | None:
        """Map informal names to a device; None if the term is unknown."""
        if term == "iWatch":
            return cls.APPLE_WATCH
        return None

    @classmethod
    def all_values(cls) -> list[Device]:
        return [cls.APPLE_TV, cls.IPHONE, cls.APPLE_WATCH]


_DEVICE_YEARS = {
    Device.APPLE_TV: 2006,
    Device.IPHONE: 2007,
    Device.IPAD: 2010,
    Device.APPLE_WATCH: 2014,
}


class TradeAction(StrEnum):
    BUY = "buy"
    SELL = "sell"

    @property
    def description(self) -> str:
        if self is TradeAction.BUY:
            return "We're buying something"
        return "We're selling something"


class TriStateSwitch(StrEnum):
    """Cycles Off -> Low -> High -> Off."""

    OFF = "off"
    LOW = "low"
    HIGH = "high"

    def next(self) -> TriStateSwitch:
        return _SWITCH_NEXT[self]


_SWITCH_NEXT = {
    TriStateSwitch.OFF: TriStateSwitch.LOW,
    TriStateSwitch.LOW: TriStateSwitch.HIGH,
    TriStateSwitch.HIGH: TriStateSwitch.OFF,
}


class NumberCategory(StrEnum):
    SMALL = "small"
    MEDIUM = "medium"
    BIG = "big"
    HUGE = "huge"

    @classmethod
    def from_number(cls, n: int) -> NumberCategory:
        if n < 10_000:
            return cls.SMALL
        if n < 1_000_000:
            return cls.MEDIUM
        if n < 100_000_000:
            return cls.BIG
        return cls.HUGE


class Liquid(float, Enum):
    """Volume units, raw value in millilitres."""

    ML = 1.0
    L = 1000.0

    def convert(self, amount: float, to: Liquid) -> float:
        return self.value / to.value * amount


# --- Custom raw-value types ---


class ScreenSize(NamedTuple):
    width: int
    height: int

    @classmethod
    def parse(cls, literal: str) -> ScreenSize:
        """Parse ``"{width, height}"``."""
        m = _SIZE_PATTERN.fullmatch(literal.strip())
        if m is None:
            msg = f"Not a size literal: {literal!r}"
            raise ValueError(msg)
        return cls(int(m.group(1)), int(m.group(2)))


_SIZE_PATTERN = re.compile(r"\{\s*(\d+)\s*,\s*(\d+)\s*\}")


class DeviceScreen(Enum):
    IPHONE_3GS = ScreenSize.parse("{320, 480}")
    IPHONE_5 = ScreenSize.parse("{320, 568}")
    IPHONE_6 = ScreenSize.parse("{375, 667}")
    IPHONE_6_PLUS = ScreenSize.parse("{414, 736}")


# --- Associated values ---

Trade = register_union(
    UnionType(
        "Trade",
        Variant("Buy", Field("stock", str), Field("amount", int)),
        Variant("Sell", Field("stock", str), Field("amount", int)),
        Variant("Hold", str, int, doc="Unlabelled fields: stock, amount."),
        doc="A stock order.",
    )
)

_describe_trade = Trade.matcher(
    Buy=lambda stock, amount: f"buy {amount} of {stock}",
    Sell=lambda stock, amount: f"sell {amount} of {stock}",
    Hold=lambda stock, amount: f"hold {amount} of {stock}",
)


def describe_trade(trade: TaggedValue) -> str:
    return _describe_trade(trade)


UserAction = register_union(
    UnionType(
        "UserAction",
        Variant("OpenURL", Field("url", str)),
        Variant(
            "SwitchProcess",
            Field("process_id", int),
            invariant=lambda process_id: 0 <= process_id < 2**32,
        ),
        Variant("Restart", Field("time", OptionalOf(datetime)), Field("into_command_line", bool)),
        doc="Actions whose cases carry unrelated payload types.",
    )
)


# --- Errors as unions ---

DecodeError = register_union(
    UnionType(
        "DecodeError",
        Variant("TypeMismatch", Field("expected", str), Field("actual", str)),
        Variant("MissingKey", str),
        Variant("Custom", str),
        doc="Related decoding failures, each with its own detail.",
    )
)

_explain = DecodeError.matcher(
    TypeMismatch=lambda expected, actual: f"expected {expected}, got {actual}",
    MissingKey=lambda key: f"missing key {key!r}",
    Custom=lambda message: message,
)


class DecodeFailure(Exception):
    """Raised with a :data:`DecodeError` value describing what went wrong."""

    def __init__(self, error: TaggedValue) -> None:
        if not DecodeError.accepts(error):
            msg = f"DecodeFailure needs a DecodeError, got {error!r}"
            raise TypeError(msg)
        self.error = error
        super().__init__(_explain(error))


def explain_decode_error(error: TaggedValue) -> str:
    return _explain(error)


ENUM_CATALOG: dict[str, type[Enum]] = {
    "Movement": Movement,
    "Direction": Direction,
    "Character": Character,
    "Character.Weapon": Character.Weapon,
    "Character.Helmet": Character.Helmet,
    "Device": Device,
    "TradeAction": TradeAction,
    "TriStateSwitch": TriStateSwitch,
    "NumberCategory": NumberCategory,
    "Liquid": Liquid,
    "DeviceScreen": DeviceScreen,
}
