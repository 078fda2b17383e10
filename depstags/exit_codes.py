"""
Standard exit codes and error types for depstags commands.

Following Unix/POSIX conventions for command-line tools.
"""
from typing import Optional

# Standard POSIX exit codes
SUCCESS = 0              # Successful termination
GENERAL_ERROR = 1        # General errors

# Application-specific exit codes (64-113 are typically available)
CONFIG_ERROR = 66        # Configuration file error
PERMISSION_ERROR = 67    # Insufficient permissions
DATA_ERROR = 70          # Dependency graph format or validation error
PARTIAL_SUCCESS = 71     # Some roots were generated, some failed
GENERATION_ERROR = 73    # Tags engine failed for every stale root
PROBE_ERROR = 74         # Filesystem probe failed
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)

# Exit code mappings for common exceptions
EXCEPTION_EXIT_CODES = {
    'FileNotFoundError': GENERAL_ERROR,
    'PermissionError': PERMISSION_ERROR,
    'ValueError': DATA_ERROR,
    'KeyError': DATA_ERROR,
    'JSONDecodeError': DATA_ERROR,
    'KeyboardInterrupt': INTERRUPTED,
}


def get_exit_code_for_exception(exc: Exception) -> int:
    """
    Get the appropriate exit code for an exception.

    Args:
        exc: The exception that occurred

    Returns:
        Appropriate exit code
    """
    if isinstance(exc, CommandError):
        return exc.exit_code
    exc_name = exc.__class__.__name__
    return EXCEPTION_EXIT_CODES.get(exc_name, GENERAL_ERROR)


class CommandError(Exception):
    """
    Exception that commands can raise to indicate specific exit codes.
    """
    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class ConfigurationError(CommandError):
    """Raised for invalid configuration, e.g. identical vi and emacs tags names."""
    def __init__(self, message: str):
        super().__init__(message, CONFIG_ERROR)


# Shorter alias used by the config loader
ConfigError = ConfigurationError


class FilesystemProbeError(CommandError):
    """Raised when probing a tags marker fails for a reason other than 'not found'."""
    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message, PROBE_ERROR)
        self.path = path


class GenerationError(CommandError):
    """Raised when the tags engine fails for a root."""
    def __init__(self, message: str, root: Optional[str] = None):
        super().__init__(message, GENERATION_ERROR)
        self.root = root


class GraphError(CommandError):
    """Raised when the dependency graph supplied by a resolver is malformed."""
    def __init__(self, message: str):
        super().__init__(message, DATA_ERROR)


class PartialSuccessError(CommandError):
    """Raised when some roots were generated and some failed."""
    def __init__(self, message: str, succeeded: int = 0, failed: int = 0):
        super().__init__(message, PARTIAL_SUCCESS)
        self.succeeded = succeeded
        self.failed = failed
