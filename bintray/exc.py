from typing import Optional


class BintrayException(Exception):
    """Base class for bintray exceptions."""

    def __init__(self, *args, code: Optional[str] = None, detail: Optional[str] = None):
        super().__init__(*args)
        self.code = code
        self.detail = detail

    def __str__(self):
        if self.detail:
            return f"{', '.join(str(arg) for arg in self.args)}:\n{self.detail}"
        return super().__str__()


class BintrayApiError(BintrayException):
    """Bintray answered a request with an error."""

    def __init__(self, message: str, status_code: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.message = message
        self.status_code = status_code


class CallGetFirst(BintrayException):
    """Attribute is only known after get() was called."""

    def __init__(self, *args, **kwargs):
        if not args:
            args = ("get() must be called first before using this function",)
        super().__init__(*args, **kwargs)


class ContentNotAvailable(BintrayException):
    """Content didn’t become available, either by timeout or on an unexpected error."""

    def __init__(self, cause: Optional[Exception] = None, **kwargs):
        super().__init__("Bintray content unavailable", **kwargs)
        self.cause = cause


class ContentChecksumNotReturned(BintrayException):
    def __init__(self, *args, **kwargs):
        super().__init__(*(args or ("Content checksum was not returned by Bintray",)), **kwargs)


class ContentChecksumRequired(BintrayException):
    def __init__(self, *args, **kwargs):
        super().__init__(*(args or ("Content checksum must be set",)), **kwargs)


class OnlyForIndexedPackages(BintrayException):
    def __init__(self, *args, **kwargs):
        if not args:
            args = ("Only for Debian and RPM repositories and packages",)
        super().__init__(*args, **kwargs)


class RpmRepoChecksumUnsupported(BintrayException):
    def __init__(self, *args, **kwargs):
        super().__init__(*(args or ("Only SHA-1 is supported in RPM indexation check",)), **kwargs)


class SpecParseFailure(BintrayException):
    """Failure parsing spec file."""


class RepodataError(BintrayException):
    """Malformed repository index data."""


class ConfigError(BintrayException):
    """Configuration file can’t be read or contains invalid values."""
