"""Shared value types embedded in lifecycle events."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class ActorType(str, Enum):
    """Kind of principal that performed an action."""

    HUMAN = "human"
    SYSTEM = "system"
    SYNTHETIC = "synthetic"


class Status(str, Enum):
    """Outcome tag attached to handled/completed/errored events.

    This is not the free-text status vocabulary used for color lookup
    (``"created"``, ``"pending"``, ...).
    """

    SUCCESS = "success"
    ERROR = "error"


class Actor(BaseModel):
    """Who performed an action."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    user_id: str
    actor_type: ActorType


class Resource(BaseModel):
    """What an action was performed on."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: str
    id: str


def new_actor(user_id: str, actor_type: ActorType) -> Actor:
    """Build an ``Actor`` of the given kind."""
    return Actor(user_id=user_id, actor_type=actor_type)


def human_actor(user_id: str) -> Actor:
    return new_actor(user_id, ActorType.HUMAN)


def system_actor(system_id: str) -> Actor:
    return new_actor(system_id, ActorType.SYSTEM)


def synthetic_actor(synthetic_id: str) -> Actor:
    return new_actor(synthetic_id, ActorType.SYNTHETIC)


def new_resource(resource_type: str, resource_id: str) -> Resource:
    """Build a ``Resource`` reference."""
    return Resource(type=resource_type, id=resource_id)
