"""Core constants: registry path templates and cache defaults.

Single source of truth for the REST paths the client issues. Subject
placeholders receive an already percent-encoded subject.
"""

# Cache defaults
DEFAULT_CACHE_CAPACITY = 512

# Transport defaults
DEFAULT_BASE_URL = "http://localhost:8081"
DEFAULT_TIMEOUT_SECONDS = 5.0
REGISTRY_CONTENT_TYPE = "application/vnd.schemaregistry.v1+json"
FORWARD_HEADER = "X-Forward"

# Subjects and versions
PATH_SUBJECTS = "/subjects"
PATH_SUBJECT_LOOKUP = "/subjects/{subject}?normalize={normalize}"
PATH_SUBJECT_DELETE = "/subjects/{subject}?permanent={permanent}"
PATH_VERSIONS = "/subjects/{subject}/versions"
PATH_REGISTER = "/subjects/{subject}/versions?normalize={normalize}"
PATH_VERSION = "/subjects/{subject}/versions/{version}"
PATH_VERSION_DELETED = "/subjects/{subject}/versions/{version}?deleted={deleted}"
PATH_VERSION_DELETE = "/subjects/{subject}/versions/{version}?permanent={permanent}"
PATH_LATEST = "/subjects/{subject}/versions/latest"
PATH_METADATA = "/subjects/{subject}/metadata?deleted={deleted}"

# Compatibility and configuration
PATH_COMPATIBILITY_LATEST = "/compatibility/subjects/{subject}/versions/latest"
PATH_COMPATIBILITY_VERSION = "/compatibility/subjects/{subject}/versions/{version}"
PATH_SUBJECT_COMPATIBILITY = "/config/{subject}/compatibility"
PATH_SUBJECT_CONFIG = "/config/{subject}"
PATH_GLOBAL_CONFIG = "/config"
