"""Capability tagging for otherwise unrelated enumerations.

Each game-entity enum gets a set of independent marker capabilities
(hurtable, killable, flying, attacking, obstacle). Capabilities compose
as a :class:`enum.Flag` bitmask keyed by enum type; there is no shared
base class and no inheritance between the entity kinds.
"""

from __future__ import annotations

from enum import Enum, Flag, StrEnum, auto


class Capability(Flag):
    HURTABLE = auto()
    KILLABLE = auto()
    FLYING = auto()
    ATTACKING = auto()
    OBSTACLE = auto()


class FlyingBeast(StrEnum):
    DRAGON = "dragon"
    HIPPOGRIFF = "hippogriff"
    GARGOYLE = "gargoyle"


class Horde(StrEnum):
    ORK = "ork"
    TROLL = "troll"


class Player(StrEnum):
    MAGE = "mage"
    WARRIOR = "warrior"
    BARBARIAN = "barbarian"


class NPC(StrEnum):
    VENDOR = "vendor"
    BLACKSMITH = "blacksmith"


class Element(StrEnum):
    TREE = "tree"
    FENCE = "fence"
    STONE = "stone"


CAPABILITY_REGISTRY: dict[type[Enum], Capability] = {}


def grant(kind: type[Enum], capabilities: Capability) -> None:
    """Add *capabilities* to every member of *kind*."""
    current = CAPABILITY_REGISTRY.get(kind, Capability(0))
    CAPABILITY_REGISTRY[kind] = current | capabilities


def capabilities_of(entity: Enum | type[Enum]) -> Capability:
    """The capability mask of an enum member or enum type (empty if unregistered)."""
    kind = entity if isinstance(entity, type) else type(entity)
    return CAPABILITY_REGISTRY.get(kind, Capability(0))


def has_capability(entity: Enum | type[Enum], capability: Capability) -> bool:
    return capability in capabilities_of(entity)


def kinds_with(capability: Capability) -> list[type[Enum]]:
    return [kind for kind, mask in CAPABILITY_REGISTRY.items() if capability in mask]


def members_with(capability: Capability) -> list[Enum]:
    """Every registered member having all of *capability*'s flags."""
    return [member for kind in kinds_with(capability) for member in kind]


def _register_capabilities() -> None:
    """Populate :data:`CAPABILITY_REGISTRY` with the built-in entity kinds."""
    grant(
        FlyingBeast,
        Capability.HURTABLE | Capability.KILLABLE | Capability.FLYING | Capability.ATTACKING,
    )
    grant(Horde, Capability.HURTABLE | Capability.KILLABLE | Capability.ATTACKING)
    grant(Player, Capability.HURTABLE | Capability.OBSTACLE)
    grant(NPC, Capability.HURTABLE)
    grant(Element, Capability.OBSTACLE)


_register_capabilities()
