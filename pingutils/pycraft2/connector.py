import socket

from . import Handshake, Status
from .errors import (
    AddressResolutionFailed,
    ConnectionFailed,
    IoError,
    UnexpectedEndOfData,
)
from .packet import States
from .status import ServerStatus

DEFAULT_PORT = 25565
DEFAULT_TIMEOUT = 10.0
# "don't care" protocol version, servers answer status for any client
ANY_PROTOCOL = -1


def parse_address(address: str) -> tuple[str, int]:
    """
    Split ``host:port`` into its parts, defaulting the port to 25565.

    Bracketed IPv6 (``[::1]:25565``) is accepted; a bare IPv6 literal is
    taken as a host without a port.

    Raises:
        AddressResolutionFailed: If the address is empty or the port is not a valid port
    """
    address = address.strip()
    if not address:
        raise AddressResolutionFailed("empty address")

    if address.startswith("["):
        host, sep, rest = address[1:].partition("]")
        if not sep or (rest and not rest.startswith(":")):
            raise AddressResolutionFailed(f"invalid address '{address}'")
        port = rest[1:] if rest else None
    elif address.count(":") == 1:
        host, port = address.split(":")
    else:
        host, port = address, None

    if not host:
        raise AddressResolutionFailed(f"missing host in '{address}'")
    if port is None:
        return host, DEFAULT_PORT

    if not (port.isascii() and port.isdigit()) or not 0 < int(port) < 2**16:
        raise AddressResolutionFailed(f"invalid port '{port}' in '{address}'")
    return host, int(port)


def resolve(address: str) -> tuple[int, tuple]:
    """
    Resolve ``address`` to the first TCP endpoint it names.

    Returns:
        tuple[int, tuple]: The address family and the socket address
    """
    host, port = parse_address(address)
    try:
        infos = socket.getaddrinfo(host, port, type=socket.SOCK_STREAM)
    except (socket.gaierror, UnicodeError) as err:
        raise AddressResolutionFailed(f"{host}:{port} ({err})") from err

    if not infos:
        raise AddressResolutionFailed(f"{host}:{port} has no addresses")
    family, _, _, _, sockaddr = infos[0]
    return family, sockaddr


class MCSocket:
    """
    Blocking connection to a Minecraft server for a single status exchange.

    The same timeout bounds the connect and every later read and write.

    Example:

    ```python
    from pingutils.pycraft2.connector import MCSocket, resolve

    with MCSocket(*resolve("localhost:25565")) as mc:
        mc.handshake_status()
        print(mc.status_request())
    ```
    """

    def __init__(self, family: int, sockaddr: tuple, timeout: float = DEFAULT_TIMEOUT):
        self.addr = sockaddr[:2]
        self.timeout = timeout
        self.state = States.HANDSHAKE

        self.sock = socket.socket(family, socket.SOCK_STREAM)
        # applies to connect, send and recv alike
        self.sock.settimeout(timeout)
        try:
            self.sock.connect(sockaddr)
        except OSError as err:
            self.sock.close()
            raise ConnectionFailed(f"{self.host}:{self.port} ({err})") from err

    @property
    def host(self) -> str:
        return self.addr[0]

    @property
    def port(self) -> int:
        return self.addr[1]

    def __enter__(self):
        return self

    def __exit__(self, *_):
        self.close()

    def close(self):
        self.sock.close()

    def write_all(self, data: bytes) -> None:
        try:
            self.sock.sendall(data)
        except OSError as err:
            raise IoError(f"write to {self.host}:{self.port} failed ({err})") from err

    def read_exact(self, n: int) -> bytes:
        result = b""
        while len(result) < n:
            try:
                new = self.sock.recv(n - len(result))
            except OSError as err:
                raise IoError(
                    f"read from {self.host}:{self.port} failed ({err})"
                ) from err
            if not new:
                raise UnexpectedEndOfData(
                    f"Connection closed with {n - len(result)} bytes remaining"
                )
            result += new
        return result

    def set_state(self, state):
        self.state = state

    # Connection methods

    def handshake_status(self, version_id: int = ANY_PROTOCOL):
        """
        Send a handshake packet asking for the status state

        Args:
            version_id (int, optional): The version of the protocol. Defaults to -1.
        """
        p = Handshake.C2S_0x00(
            protocol_version=version_id,
            server_address=self.host,
            server_port=self.port,
            next_state=States.STATUS,
        )
        p.send(self)
        self.set_state(States.STATUS)

    def status_request(self) -> dict:
        """
        Send a status request and read the response JSON

        Returns:
            dict: The response from the server
        """
        Status.C2S_0x00().send(self)

        response = Status.S2C_0x00().read_response(self)
        return response.read_json()


def ping(address: str, timeout: float = DEFAULT_TIMEOUT) -> ServerStatus:
    """
    Ping a Minecraft server once and return its status.

    Blocking; callers on an event loop should run it in a worker thread.

    Args:
        address (str): ``host:port``, the port defaults to 25565
        timeout (float, optional): Bound in seconds for the connect and each read/write. Defaults to 10.

    Returns:
        ServerStatus: The decoded status

    Raises:
        ProtocolError: One of its subclasses, naming the step that failed
    """
    family, sockaddr = resolve(address)

    with MCSocket(family, sockaddr, timeout=timeout) as mc:
        mc.handshake_status()
        doc = mc.status_request()

    return ServerStatus.from_dict(doc)
