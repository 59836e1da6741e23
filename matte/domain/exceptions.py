class MatteException(Exception):
    """Base exception for all framework errors."""
    pass

class SchemaException(MatteException):
    """Raised when an entity kind declares an invalid field set."""
    pass

class RegistrationException(MatteException):
    """Raised when a resource cannot be registered."""
    pass

class InvalidIdFormatException(MatteException):
    """Raised when a path segment is not a valid 64-bit identifier."""
    def __init__(self, raw_id: str, message: str = "Invalid ID format"):
        self.raw_id = raw_id
        super().__init__(message)

class EntityNotFoundException(MatteException):
    """Raised when no entity is stored under the requested id."""
    def __init__(self, resource_name: str, entity_id: int):
        self.resource_name = resource_name
        self.entity_id = entity_id
        super().__init__(f"{resource_name[:1].upper()}{resource_name[1:]} not found")
