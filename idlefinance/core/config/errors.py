"""
Configuration error hierarchy for Idle Finance.

Exception Hierarchy
-------------------
ConfigError (base)
└── ConfigValidationError (unreadable or malformed balance files)
"""


class ConfigError(Exception):
    """
    Base exception for all configuration-related errors.

    Example
    -------
    >>> try:
    ...     config = load_engine_config("balance.yaml")
    ... except ConfigError as e:
    ...     logger.error(f"Config load failed: {e}")
    """

    pass


class ConfigValidationError(ConfigError):
    """
    Raised when a balance file cannot be turned into an ``EngineConfig``.

    This exception is raised when:
    - The file is missing or is not valid YAML
    - Required sections or fields are missing
    - Values have the wrong type or violate model invariants
    """

    def __init__(self, message: str, path: str = None):
        super().__init__(message)
        self.path = path


__all__ = [
    "ConfigError",
    "ConfigValidationError",
]
