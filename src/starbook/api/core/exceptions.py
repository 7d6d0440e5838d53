"""
Custom exception classes for StarBook mount control.

This module defines specific exceptions for different types of errors
that can occur during mount operations.
"""

from __future__ import annotations


__all__ = [
    "CommunicationError",
    "ConfigurationError",
    "InvalidCoordinateError",
    "NotConnectedError",
    "ObjectNotFoundError",
    "ProtocolError",
    "StarBookError",
    "UnsupportedFormatError",
]


class StarBookError(Exception):
    """
    Base exception for all StarBook errors.

    All custom exceptions in this library inherit from this base class,
    making it easy to catch all mount-related errors.
    """

    pass


class CommunicationError(StarBookError):
    """
    Raised when the StarBook cannot be reached.

    This can occur when:
    - The IP address is wrong or the controller is powered off
    - The HTTP request times out
    - The controller answers with a non-success HTTP status
    """

    pass


class NotConnectedError(CommunicationError):
    """
    Raised when attempting to send commands after the session was closed.
    """

    pass


class ProtocolError(StarBookError):
    """
    Raised when a reply does not have the expected shape.

    This can occur when:
    - The reply lacks the <!-- ... --> payload delimiters
    - The payload does not match the expected field format
    - The controller reports an unknown state code
    """

    pass


class InvalidCoordinateError(StarBookError):
    """
    Raised when a coordinate cannot be parsed or is out of range.

    This occurs when the input is:
    - Neither a number, a 2/3-element sequence nor a parseable string
    - RA outside 0-24 hours
    - Dec outside -90 to +90 degrees
    - Minutes outside 0-60
    """

    pass


class ObjectNotFoundError(StarBookError):
    """Raised when an object name cannot be resolved to coordinates."""

    pass


class UnsupportedFormatError(StarBookError):
    """Raised when the screen framebuffer is not a 320x240 12-bit image."""

    pass


class ConfigurationError(StarBookError):
    """Raised when configuration values are invalid."""

    pass
