"""Domain enumerations for the schema registry client."""

from enum import Enum


class Compatibility(str, Enum):
    """Compatibility policy constraining how a new schema version may evolve."""

    NONE = "NONE"
    BACKWARD = "BACKWARD"
    FORWARD = "FORWARD"
    FULL = "FULL"
    BACKWARD_TRANSITIVE = "BACKWARD_TRANSITIVE"
    FORWARD_TRANSITIVE = "FORWARD_TRANSITIVE"
    FULL_TRANSITIVE = "FULL_TRANSITIVE"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid compatibility values as strings."""
        return [level.value for level in cls]


class SchemaType(str, Enum):
    """Schema formats understood by the registry. AVRO is the server default."""

    AVRO = "AVRO"
    JSON = "JSON"
    PROTOBUF = "PROTOBUF"


class HttpMethod(str, Enum):
    """HTTP methods the client issues to the transport."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
