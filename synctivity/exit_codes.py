"""
Standard exit codes for synctivity commands.

Following Unix/POSIX conventions for command-line tools.
"""
from typing import Optional

# Standard POSIX exit codes
SUCCESS = 0              # Successful termination
GENERAL_ERROR = 1        # General errors
USAGE_ERROR = 2          # Misuse of shell command (wrong arguments, etc.)

# Application-specific exit codes (64-113 are typically available)
NO_REPOS_FOUND = 64      # No source repositories found in the input directory
CONFIG_ERROR = 66        # Configuration file error
PERMISSION_ERROR = 67    # Insufficient permissions
DATA_ERROR = 70          # Data format or validation error
PRECONDITION_FAILED = 72 # Target repository is not in a syncable state
GIT_ERROR = 73           # A git invocation failed
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)

# Exit code mappings for common exceptions
EXCEPTION_EXIT_CODES = {
    'FileNotFoundError': GENERAL_ERROR,
    'NotADirectoryError': USAGE_ERROR,
    'PermissionError': PERMISSION_ERROR,
    'ValueError': DATA_ERROR,
    'UnicodeDecodeError': DATA_ERROR,
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


class ValidationError(CommandError):
    """Raised when user supplied values (names, emails) are malformed."""
    def __init__(self, message: str):
        super().__init__(message, DATA_ERROR)


class InvalidInputError(CommandError):
    """Raised when an input or output path cannot be used."""
    def __init__(self, message: str):
        super().__init__(message, USAGE_ERROR)


class NoReposFoundError(CommandError):
    """Raised when no source repositories are found."""
    def __init__(self, message: str = "No repositories found in the input directory"):
        super().__init__(message, NO_REPOS_FOUND)


class ExistingHistoryError(CommandError):
    """Raised when the target repository already has committed history."""
    def __init__(self, message: str = "Cannot handle existing repository history yet."):
        super().__init__(message, PRECONDITION_FAILED)


class GitCommandError(CommandError):
    """Raised when a git invocation fails."""
    def __init__(self, message: str, cmd=None, returncode: Optional[int] = None,
                 stderr: str = ""):
        super().__init__(message, GIT_ERROR)
        self.cmd = cmd
        self.returncode = returncode
        self.stderr = stderr


class ConfigError(CommandError):
    """Raised when there's a configuration error."""
    def __init__(self, message: str):
        super().__init__(message, CONFIG_ERROR)
