"""Domain-oriented observability infrastructure.

Probes in the bounded contexts bind an ObservationContext so that every
event emitted during one operation carries the same correlation metadata.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from infrastructure.observability.context import ObservationContext

__all__ = [
    "ObservationContext",
]
