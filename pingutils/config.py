"""Settings from ``privVars.py``.

Any variable with a default value is optional, while those left as ``"..."``
are required.
"""
import importlib
import os

from .pycraft2.connector import DEFAULT_TIMEOUT, parse_address
from .pycraft2.errors import AddressResolutionFailed

UNSET = "..."

PRIV_VARS_TEMPLATE = """#  Path: privVars.py
# any variable with a default value is optional, while those with '...' are required
MC_SERVER_ADDRESS = "..."  # host:port, e.g. localhost:25565
DISCORD_WEBHOOK = "..."  # critical errors are posted here
SENTRY_URI = "..."

# ping settings
PING_TIMEOUT = 10
DEBUG = False
LOG_LEVEL = 20
"""


class ConfigError(Exception):
    pass


class Config:
    def __init__(
        self,
        mc_server_address: str,
        ping_timeout: float = DEFAULT_TIMEOUT,
        debug: bool = False,
        log_level: int = 20,
        discord_webhook: str = None,
        sentry_uri: str = None,
    ):
        self.mc_server_address = mc_server_address
        self.ping_timeout = ping_timeout
        self.debug = debug
        self.log_level = log_level
        self.discord_webhook = discord_webhook
        self.sentry_uri = sentry_uri

    def __repr__(self):
        return (
            f"Config(mc_server_address={self.mc_server_address!r}, "
            f"ping_timeout={self.ping_timeout}, debug={self.debug})"
        )

    @classmethod
    def load(cls, module: str = "privVars", address: str = None) -> "Config":
        """Reads the settings module, ``address`` overrides MC_SERVER_ADDRESS

        Raises:
            ConfigError: If a required value is missing or invalid
        """
        try:
            priv = importlib.import_module(module)
        except ImportError:
            priv = None

        def get(name, default=UNSET):
            value = getattr(priv, name, default)
            return default if value == UNSET else value

        if address:
            # the port may be left out on the command line, it defaults to 25565
            try:
                parse_address(address)
            except AddressResolutionFailed as err:
                raise ConfigError(f"Invalid server address: {err}") from err
            mc_server_address = address
        else:
            mc_server_address = get("MC_SERVER_ADDRESS")
            if mc_server_address == UNSET:
                raise ConfigError(
                    "Please add your server address to 'privVars.py' "
                    "(e.g. MC_SERVER_ADDRESS = \"localhost:25565\")"
                )
            validate_server_address(mc_server_address)

        try:
            ping_timeout = float(get("PING_TIMEOUT", DEFAULT_TIMEOUT))
        except (TypeError, ValueError) as err:
            raise ConfigError(f"Invalid PING_TIMEOUT in 'privVars.py': {err}") from err
        if ping_timeout <= 0:
            raise ConfigError("PING_TIMEOUT in 'privVars.py' must be positive")

        debug = get("DEBUG", False)
        if not isinstance(debug, bool):
            raise ConfigError(f"DEBUG in 'privVars.py' must be True or False, not {debug!r}")

        log_level = get("LOG_LEVEL", 20)
        try:
            log_level = int(log_level)
        except (TypeError, ValueError) as err:
            raise ConfigError(f"Invalid LOG_LEVEL in 'privVars.py': {err}") from err

        return cls(
            mc_server_address=mc_server_address,
            ping_timeout=ping_timeout,
            debug=debug,
            log_level=log_level,
            discord_webhook=get("DISCORD_WEBHOOK", None),
            sentry_uri=get("SENTRY_URI", None),
        )


def validate_server_address(address: str) -> None:
    """The configured address must name its port explicitly

    Raises:
        ConfigError: If the address is not ``host:port`` with a valid port
    """
    try:
        parse_address(address)
    except AddressResolutionFailed as err:
        raise ConfigError(f"Invalid MC_SERVER_ADDRESS: {err}") from err

    address = address.strip()
    if address.startswith("["):
        has_port = "]:" in address
    else:
        has_port = address.count(":") == 1
    if not has_port:
        raise ConfigError(
            f"Invalid MC_SERVER_ADDRESS format: '{address}'. Expected 'host:port' format."
        )


def write_template(path: str = "privVars.py") -> bool:
    """Creates privVars.py from the template if it does not exist yet

    Returns:
        bool: True if the file was created
    """
    if os.path.exists(path):
        return False
    with open(path, "w") as f:
        f.write(PRIV_VARS_TEMPLATE)
    return True
