"""Line-oriented TCP transport to the IVA controller.

Handles:
    - ``\\r\\n``-terminated requests, ``\\n``-terminated replies
    - Listening for the controller's call-back connection (the IVA
      runtime dials the client once its program starts)
    - Dialling out to a controller that listens, with bounded retries

There are no request IDs on the wire: replies are matched to requests
purely by order.  Exactly one reply must be read per request before the
next request is written; :class:`inovo_control.hardware.robot.Robot`
guarantees this by issuing every call synchronously.

All timeouts and retry counts come from ``RobotConfig.connection``.
"""

from __future__ import annotations

import logging
import socket
import time
from abc import ABC, abstractmethod
from typing import Any

from inovo_control.errors import TransportError

logger = logging.getLogger(__name__)

REQUEST_TERMINATOR = "\r\n"
ENCODING = "utf-8"


class Transport(ABC):
    """One blocking request/response channel."""

    @abstractmethod
    def send(self, message: str) -> None:
        """Write one message line."""

    @abstractmethod
    def receive(self) -> str:
        """Block until one reply line arrives and return it stripped."""

    def close(self) -> None:
        """Release the channel.  Default: nothing to release."""


class LineTransport(Transport):
    """Transport over a connected stream socket.

    Parameters
    ----------
    sock : socket.socket
        Connected socket.  Ownership passes to the transport.
    timeout : float | None
        Per-read timeout in seconds; ``None`` blocks indefinitely.

    Examples
    --------
    >>> with LineTransport.listen("0.0.0.0", 50003, timeout=60.0) as t:
    ...     t.send("query,pose,transform")
    ...     reply = t.receive()
    """

    def __init__(self, sock: socket.socket, timeout: float | None = None) -> None:
        self._sock: socket.socket | None = sock
        self._sock.settimeout(timeout)
        self._reader = sock.makefile("r", encoding=ENCODING, newline="\n")
        try:
            self.peer = sock.getpeername()
        except OSError:
            self.peer = None
        logger.info("Transport ready (peer: %s)", self.peer)

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def listen(
        cls,
        host: str,
        port: int,
        *,
        timeout: float | None = None,
        accept_timeout: float | None = None,
    ) -> LineTransport:
        """Bind *host*:*port* and accept exactly one controller connection.

        Raises
        ------
        TransportError
            If binding fails or nobody connects within *accept_timeout*.
        """
        logger.info("Listening for controller on %s:%d", host, port)
        try:
            with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as server:
                server.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
                server.bind((host, port))
                server.listen(1)
                server.settimeout(accept_timeout)
                conn, addr = server.accept()
        except socket.timeout as exc:
            raise TransportError(
                f"No controller connected to {host}:{port} "
                f"within {accept_timeout}s"
            ) from exc
        except OSError as exc:
            raise TransportError(f"Cannot listen on {host}:{port}: {exc}") from exc
        logger.info("Accepted controller connection from %s:%d", *addr[:2])
        return cls(conn, timeout=timeout)

    @classmethod
    def connect(
        cls,
        host: str,
        port: int,
        *,
        timeout: float | None = None,
        attempts: int = 1,
        interval: float = 1.0,
    ) -> LineTransport:
        """Dial *host*:*port*, retrying up to *attempts* times.

        Raises
        ------
        TransportError
            If every attempt fails.
        """
        for attempt in range(1, attempts + 1):
            try:
                logger.info(
                    "Connecting to controller at %s:%d (attempt %d/%d)",
                    host, port, attempt, attempts,
                )
                sock = socket.create_connection((host, port), timeout=timeout)
                return cls(sock, timeout=timeout)
            except OSError as exc:
                logger.warning("Connection attempt %d failed: %s", attempt, exc)
                if attempt < attempts:
                    time.sleep(interval)

        raise TransportError(
            f"Failed to connect to controller at {host}:{port} "
            f"after {attempts} attempts"
        )

    # ------------------------------------------------------------------
    # I/O
    # ------------------------------------------------------------------

    @property
    def is_open(self) -> bool:
        return self._sock is not None

    def send(self, message: str) -> None:
        if self._sock is None:
            raise TransportError("Transport is closed")
        logger.debug(">>> %s", message)
        try:
            self._sock.sendall((message + REQUEST_TERMINATOR).encode(ENCODING))
        except OSError as exc:
            raise TransportError(f"Send failed: {exc}") from exc

    def receive(self) -> str:
        if self._sock is None:
            raise TransportError("Transport is closed")
        try:
            line = self._reader.readline()
        except socket.timeout as exc:
            raise TransportError("Timed out waiting for a reply") from exc
        except UnicodeDecodeError as exc:
            raise TransportError(f"Undecodable reply: {exc}") from exc
        except OSError as exc:
            raise TransportError(f"Receive failed: {exc}") from exc
        if not line:
            raise TransportError("Connection closed by controller")
        reply = line.strip()
        logger.debug("<<< %s", reply)
        return reply

    def close(self) -> None:
        if self._sock is None:
            return
        try:
            self._reader.close()
            self._sock.close()
        except OSError:
            pass
        self._sock = None
        logger.info("Transport closed")

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> LineTransport:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
