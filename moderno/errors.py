from typing import Any, List, Optional


class ModernoError(Exception):
    """Base class for domain errors raised below the HTTP layer."""


class NotFoundError(ModernoError):
    """A referenced client, transaction or other record does not exist."""

    def __init__(self, entity: str, entity_id: Any = None):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found")


class ValidationError(ModernoError):
    """Input was well-formed JSON but breaks a domain rule."""

    def __init__(self, message: str, errors: Optional[List[dict]] = None):
        self.message = message
        self.errors = errors or []
        super().__init__(message)
