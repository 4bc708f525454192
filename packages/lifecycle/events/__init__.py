"""Public lifecycle event model API."""

from .models import (
    EVENT_TYPES,
    AnyEvent,
    LifecycleEvent,
    PayloadRedactor,
    QueryCompletedEvent,
    QueryErroredEvent,
    QueryStartedEvent,
    RequestErroredEvent,
    RequestHandledEvent,
    RequestReceivedEvent,
    RequestRetriedEvent,
    ResourceCreatedEvent,
    ResourceDeletedEvent,
    ResourceUpdatedEvent,
    ServiceCrashedEvent,
    ServiceHealthyEvent,
    ServiceShutdownEvent,
    ServiceStartedEvent,
    TransactionCommittedEvent,
    TransactionRolledBackEvent,
    TransactionStartedEvent,
    parse_event,
)
from .types import (
    Actor,
    ActorType,
    Resource,
    Status,
    human_actor,
    new_actor,
    new_resource,
    synthetic_actor,
    system_actor,
)

__all__ = [
    "EVENT_TYPES",
    "Actor",
    "ActorType",
    "AnyEvent",
    "LifecycleEvent",
    "PayloadRedactor",
    "QueryCompletedEvent",
    "QueryErroredEvent",
    "QueryStartedEvent",
    "RequestErroredEvent",
    "RequestHandledEvent",
    "RequestReceivedEvent",
    "RequestRetriedEvent",
    "Resource",
    "ResourceCreatedEvent",
    "ResourceDeletedEvent",
    "ResourceUpdatedEvent",
    "ServiceCrashedEvent",
    "ServiceHealthyEvent",
    "ServiceShutdownEvent",
    "ServiceStartedEvent",
    "Status",
    "TransactionCommittedEvent",
    "TransactionRolledBackEvent",
    "TransactionStartedEvent",
    "human_actor",
    "new_actor",
    "new_resource",
    "parse_event",
    "synthetic_actor",
    "system_actor",
]
