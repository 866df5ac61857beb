"""Class for pinging servers on behalf of callers that want text back.
"""
import asyncio
from typing import Optional

import sentry_sdk

from .logger import Logger
from .pycraft2 import connector
from .pycraft2.errors import (
    AddressResolutionFailed,
    ConnectionFailed,
    DecodeError,
    IoError,
    MalformedStatusPayload,
    ProtocolError,
)
from .pycraft2.status import ServerStatus
from .text import Text


class Server:
    """Calls the status client, logs the outcome and renders it."""

    def __init__(
            self,
            logger: "Logger",
            text: "Text",
            timeout: float = connector.DEFAULT_TIMEOUT,
    ):
        self.logger = logger
        self.text = text
        self.timeout = timeout

    def ping(self, address: str) -> ServerStatus:
        """Pings ``address`` once, raising on failure

        Args:
            address (str): ``host:port``, the port defaults to 25565

        Returns:
            ServerStatus: The decoded status

        Raises:
            ProtocolError: If any step of the exchange fails
        """
        sentry_sdk.add_breadcrumb(category="ping", message=f"Pinging {address}")
        return self.logger.timer(connector.ping, address, timeout=self.timeout)

    def status(self, address: str) -> Optional[ServerStatus]:
        """Returns the status of a server, or None if it could not be fetched

        Args:
            address (str): ``host:port``, the port defaults to 25565

        Returns:
            Optional[ServerStatus]: The status
        """
        try:
            return self.ping(address)
        except AddressResolutionFailed as err:
            self.logger.print(f"Connection error (invalid host): {err}")
        except ConnectionFailed as err:
            self.logger.print(f"Connection error (refused): {err}")
        except IoError as err:
            self.logger.print(f"Connection error: {err}")
        except (DecodeError, MalformedStatusPayload) as err:
            self.logger.warning(f"Bad status response from {address}: {err}")
        except Exception as err:
            self.logger.exception(f"Unexpected error pinging {address}: {err}")
            sentry_sdk.capture_exception(err)
        return None

    def status_text(self, address: str) -> str:
        """Returns the rendered status of a server, or why it could not be fetched

        Args:
            address (str): ``host:port``, the port defaults to 25565

        Returns:
            str: A message ready to show to a user
        """
        try:
            status = self.ping(address)
        except ProtocolError as err:
            self.logger.warning(f"Failed to get status for {address}: {err}")
            return self.text.error_message(err)

        self.logger.info(
            f"{address} is up, {status.players.online}/{status.players.max} players"
        )
        return self.text.status_message(status)

    async def async_status(self, address: str) -> Optional[ServerStatus]:
        """Same as `status`, run in a worker thread so the event loop is not blocked"""
        return await asyncio.to_thread(self.status, address)

    async def async_status_text(self, address: str) -> str:
        """Same as `status_text`, run in a worker thread so the event loop is not blocked"""
        return await asyncio.to_thread(self.status_text, address)
