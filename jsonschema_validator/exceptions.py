"""
Error taxonomy shared by configuration, compilation and validation.

UsageError and its subclasses abort the whole run (exit code 2).
CompileError aborts a single schema entry. DocumentError and
DocumentValidationError are recorded per document and never stop the run.
"""

from typing import Iterable, List, Optional


class ValidatorError(Exception):
    """Base class for all errors raised by jsonschema_validator"""


class UsageError(ValidatorError):
    """Bad flags, missing required input, or unusable configuration"""

    exit_code = 2


class ConfigError(UsageError):
    """Configuration file is unreadable, malformed, or fails entry validation"""


class UnsupportedSchemaVersion(UsageError, ValueError):
    """A schema-version string that does not name a known draft"""

    def __init__(self, version: str, supported: Iterable[str]):
        self.version = version
        self.supported = list(supported)
        super().__init__(
            f"unsupported schema version: {version!r} (supported: {', '.join(self.supported)})"
        )


class CompileError(ValidatorError):
    """Schema is invalid or references something that cannot be resolved"""


class RefOverrideError(CompileError):
    """A $ref override file could not be read, parsed, or registered"""

    def __init__(self, remote_url: str, local_path: str, reason: str):
        self.remote_url = remote_url
        self.local_path = local_path
        super().__init__(
            f"ref-override: failed to register {remote_url!r} -> {local_path!r}: {reason}"
        )


class DocumentError(ValidatorError):
    """Document could not be read or parsed"""


class DocumentValidationError(ValidatorError):
    """Document does not satisfy its schema"""

    def __init__(self, message: str, errors: Optional[List] = None):
        self.errors = errors or []
        super().__init__(message)
