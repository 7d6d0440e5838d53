"""
StarBook Communication Protocol Implementation

This module implements the low-level StarBook protocol: plain HTTP GET
requests against the controller, with replies either checked for a literal
answer or scanned for formatted fields.

Protocol details:
- Transport: HTTP GET on http://<ip>/<command>[?<query>], unauthenticated
- Default address: 169.254.1.1
- Formatted replies: fields embedded in an HTML comment, e.g.
  <!--RA=12+34.500000&DEC=-5+23.000000&GOTO=0&STATE=SCOPE-->
- Command replies: literal 'OK' or 'ERROR:FORMAT', 'ERROR:ILLEGAL STATE',
  'ERROR:BELOW HORIZON'
- Screen: getscreen.bin returns a 115200-byte 12-bit packed framebuffer
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from typing import Any, Final

import deal
import requests
from returns.result import Failure, Result, Success

from starbook.api.core.constants import DEFAULT_HOST
from starbook.api.core.exceptions import CommunicationError, NotConnectedError, ProtocolError


__all__ = ["ILLEGAL_STATE", "StarBookProtocol"]


logger = logging.getLogger(__name__)


ILLEGAL_STATE: Final[tuple[str, str]] = ("ERROR", "ILLEGAL STATE")
"""Sentinel returned instead of raising when the controller refuses a command in its current state."""

_FIELD = re.compile(r"%(\d*)(\[\^?[^\]]+\]|[dfsc%])")
_ERROR = re.compile(r"ERROR:[A-Z ]*[A-Z]")


def _scanset(field: str, width: str) -> str:
    body = field[1:-1]
    negate = body.startswith("^")
    chars = re.escape(body[1:] if negate else body)
    repeat = f"{{1,{width}}}" if width else "+"
    return f"([{'^' if negate else ''}{chars}]{repeat})"


def _compile_format(fmt: str) -> tuple[re.Pattern[str], list[Callable[[str], Any]]]:
    """
    Translate a scanf-style format into a regular expression.

    Supported fields: %d (int), %f (float), %s (word), %Ns (up to N chars),
    %c / %Nc (exactly N chars), %[...] / %[^...] (scansets, kept as text).
    Everything else is matched literally.
    """
    pattern = ""
    converters: list[Callable[[str], Any]] = []
    position = 0
    for match in _FIELD.finditer(fmt):
        pattern += re.escape(fmt[position : match.start()])
        position = match.end()
        width, kind = match.groups()
        match kind:
            case "d":
                pattern += r"\s*([-+]?\d+)"
                converters.append(int)
            case "f":
                pattern += r"\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)"
                converters.append(float)
            case "s":
                pattern += rf"\s*(\S{{1,{width}}})" if width else r"\s*(\S+)"
                converters.append(str)
            case "c":
                pattern += rf"(.{{{width or 1}}})"
                converters.append(str)
            case "%":
                pattern += "%"
            case _:
                pattern += _scanset(kind, width)
                converters.append(str)
    pattern += re.escape(fmt[position:])
    return re.compile(pattern, re.DOTALL), converters


class StarBookProtocol:
    """
    Low-level implementation of the StarBook HTTP protocol.

    This class handles:
    - HTTP session management and timeouts
    - Command transmission and reply reception
    - Reply checking (literal answers) and scanning (formatted fields)
    - Protocol-level error handling
    """

    # Protocol constants
    DEFAULT_TIMEOUT = 5.0
    DEFAULT_CONNECT_TIMEOUT = 1.0
    PAYLOAD_START = "<!--"
    PAYLOAD_END = "-->"

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        timeout: float = DEFAULT_TIMEOUT,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        session: requests.Session | None = None,
    ):
        """
        Initialize protocol handler.

        Args:
            host: StarBook IP address or host name (default: '169.254.1.1')
            timeout: Timeout for commands in seconds
            connect_timeout: Short timeout used by probe()
            session: Optional pre-configured requests session
        """
        self.host = host
        self.timeout = timeout
        self.connect_timeout = connect_timeout
        self.session = session or requests.Session()
        self._closed = False

    @property
    def base_url(self) -> str:
        return f"http://{self.host}/"

    def close(self) -> None:
        """Close the HTTP session."""
        if not self._closed:
            self.session.close()
            self._closed = True
            logger.info(f"HTTP session closed for {self.host}")

    def is_open(self) -> bool:
        """Check if the session can still send commands."""
        return not self._closed

    def _get(self, command: str, timeout: float | None) -> requests.Response:
        if self._closed:
            raise NotConnectedError(f"Session to {self.host} is closed") from None

        url = self.base_url + command
        logger.debug(f"Sending command: {command!r}")
        try:
            response = self.session.get(url, timeout=timeout or self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Error in communication with StarBook at {self.host}: {e}")
            raise CommunicationError(f"Failed to send {command!r} to {self.host}: {e}") from e
        return response

    @deal.pre(lambda self, command, timeout=None: not command.startswith("/"), message="Command is relative to the device root")  # type: ignore[misc,arg-type]
    @deal.raises(CommunicationError, NotConnectedError)
    def send(self, command: str, timeout: float | None = None) -> str:
        """
        Send a command and return the reply text.

        Args:
            command: Command path and query, e.g. 'getstatus' or 'setspeed?speed=6'
            timeout: Override of the command timeout in seconds

        Returns:
            Reply body as text

        Raises:
            CommunicationError: If the host is unreachable or answers with an HTTP error
        """
        text = self._get(command, timeout).text
        logger.debug(f"Received reply: {text!r}")
        return text

    @deal.raises(CommunicationError, NotConnectedError)
    def send_binary(self, command: str, timeout: float | None = None) -> bytes:
        """
        Send a command and return the raw reply body (used for getscreen.bin).

        Raises:
            CommunicationError: If the host is unreachable or answers with an HTTP error
        """
        content = self._get(command, timeout).content
        logger.debug(f"Received {len(content)} bytes for {command!r}")
        return content

    # ========== Reply Parsing ==========

    @classmethod
    def extract_payload(cls, reply: str) -> str | None:
        """
        Return the text between '<!--' and '-->', or None if the delimiters are absent.
        """
        start = reply.find(cls.PAYLOAD_START)
        if start < 0:
            return None
        start += len(cls.PAYLOAD_START)
        end = reply.find(cls.PAYLOAD_END, start)
        if end < 0:
            return None
        return reply[start:end]

    @staticmethod
    def scan_reply(payload: str, fmt: str) -> Result[tuple[Any, ...], str]:
        """
        Scan a reply payload against a scanf-style format.

        Args:
            payload: Text found inside the reply comment
            fmt: Format such as 'RA=%d+%f&DEC=%[^+]+%f&GOTO=%d&STATE=%4s'

        Returns:
            Success with the typed fields, or Failure with an error message

        Example:
            >>> StarBookProtocol.scan_reply("X=10&Y=-20", "X=%d&Y=%d")
            <Success: (10, -20)>
        """
        pattern, converters = _compile_format(fmt)
        match = pattern.match(payload.strip())
        if match is None:
            return Failure(f"Reply {payload!r} does not match format {fmt!r}")
        try:
            return Success(tuple(convert(value) for convert, value in zip(converters, match.groups(), strict=True)))
        except ValueError as e:
            return Failure(f"Failed to convert fields of {payload!r}: {e}")

    @deal.raises(CommunicationError, NotConnectedError, ProtocolError)
    def send_and_scan(self, command: str, expected: str = "", timeout: float | None = None) -> Any:
        """
        Send a command and interpret the reply.

        - If ``expected`` holds '%' fields, the payload inside '<!-- -->' is scanned
          and the typed fields are returned (a single field is returned as a scalar).
        - If ``expected`` is a literal, it is returned when the reply contains it.
          Otherwise a warning is logged and the ILLEGAL_STATE sentinel, the
          'ERROR:...' text of the reply, or the raw reply is returned.
        - If ``expected`` is empty, the raw reply is returned unchecked.

        Args:
            command: Command path and query
            expected: Format string or literal answer
            timeout: Override of the command timeout in seconds

        Returns:
            Scanned value(s), the expected literal, or the device answer

        Raises:
            CommunicationError: If the device cannot be reached
            ProtocolError: If a formatted reply lacks its payload or does not match
        """
        reply = self.send(command, timeout=timeout)

        if "%" in expected:
            payload = self.extract_payload(reply)
            if payload is None:
                raise ProtocolError(f"Reply to {command!r} has no <!-- --> payload: {reply!r}")
            result = self.scan_reply(payload, expected)
            if isinstance(result, Failure):
                raise ProtocolError(result.failure())
            values = result.unwrap()
            return values[0] if len(values) == 1 else values

        if not expected or expected in reply:
            return expected or reply

        logger.warning(f"Unexpected answer from StarBook to {command!r}: {reply.strip()!r}")
        if "ILLEGAL STATE" in reply:
            return ILLEGAL_STATE
        error = _ERROR.search(reply)
        return error.group(0) if error else reply.strip()

    def probe(self) -> str:
        """
        Check that a StarBook answers, using the short connect timeout.

        Returns:
            Firmware version string

        Raises:
            CommunicationError: If nothing answers in time
            ProtocolError: If something answers but not like a StarBook
        """
        return str(self.send_and_scan("getversion", "version=%s", timeout=self.connect_timeout))
