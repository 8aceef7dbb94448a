"""Exceptions raised by the Birdwatch core and mapped by the transport layers."""


class BirdwatchError(Exception):
    """Base error for Birdwatch operations."""


class NotFoundError(BirdwatchError):
    """Raised when an id-bearing operation targets a record that does not exist."""

    def __init__(self, entity: str, entity_id: int):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found with id {entity_id}")


class InvalidArgumentError(BirdwatchError, ValueError):
    """Raised when a request is rejected before any store access or mutation.

    Covers malformed pagination windows, unknown sort fields and sighting
    writes that reference a bird which does not exist.
    """
