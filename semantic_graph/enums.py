from enum import Enum

class HTTPMethod(Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"

class OperationType(Enum):
    """Classification tag assigned to every extracted operation"""
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    SEARCH = "search"
    ACTION = "action"      # activate, complete, ...
    DEPLOY = "deploy"      # Deployment of foundational resources
    SETUP = "setup"        # Initialization operations

class DependencyStrength(Enum):
    """How strongly a target operation depends on its source"""
    REQUIRED = "required"        # Source must run first
    OPTIONAL = "optional"        # Target benefits from source
    CONDITIONAL = "conditional"  # Depends on consistency timing

class ParameterLocation(Enum):
    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    COOKIE = "cookie"

class InvalidationType(Enum):
    WRONG_TYPE = "wrong_type"
    WRONG_FORMAT = "wrong_format"
    OUT_OF_BOUNDS = "out_of_bounds"
    WRONG_SEMANTIC_TYPE = "wrong_semantic_type"

class RiskLevel(Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
