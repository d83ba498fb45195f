"""
Exception types raised by the Antigravity companion
"""


class AgentError(Exception):
    """Base class for every error the companion surfaces to callers"""


class ValidationError(AgentError):
    """A path failed the exists-and-is-a-regular-file check"""

    def __init__(self, path):
        self.path = path
        super().__init__(f"invalid executable path: {path}")


class UnsupportedPlatformError(AgentError):
    """The operation is not defined on the running operating system"""

    def __init__(self, os_name: str):
        self.os_name = os_name
        super().__init__(f"unsupported operating system: {os_name}")


class ConfigError(AgentError):
    """Reading or writing the companion config file failed"""


class TerminationError(AgentError):
    """Every kill pattern failed; only the last attempt is reported"""

    def __init__(self, message: str, pattern: str | None = None):
        self.pattern = pattern
        super().__init__(message)


class ProcessEnumerationError(AgentError):
    """The process table could not be read"""


class WindowHostError(AgentError):
    """A read from or write to the host window failed"""
