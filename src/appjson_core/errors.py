"""Exception taxonomy for appjson-core."""

from typing import Optional


class AppJsonError(Exception):
    """Base exception for all appjson errors."""

    pass


# Parse errors


class JsonParseError(AppJsonError):
    """Raw value could not be decoded into a JSON object."""

    def __init__(self, raw: object, details: str) -> None:
        self.raw = raw
        self.details = details
        super().__init__(f"Cannot parse JSON: {details}")


# Property source errors


class PropertySourceError(AppJsonError):
    """Invalid operation on an ordered property source list."""

    def __init__(self, message: str, name: Optional[str] = None) -> None:
        self.name = name
        super().__init__(message)


# Settings errors


class SettingsError(AppJsonError):
    """Failed to load or validate processor settings."""

    pass
