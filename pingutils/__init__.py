import sentry_sdk

from .config import Config, ConfigError
from .logger import Logger
from .pycraft2 import ProtocolError, ServerStatus, ping
from .server import Server
from .text import Text


class Utils:
    """A class to hold all the pingutils classes"""

    def __init__(
        self,
        discord_webhook: str = None,
        log: Logger = None,
        debug: bool = False,
        level: int = 20,
        timeout: float = 10.0,
        sentry_dsn: str = None,
        ssdk: "sentry_sdk" = None,
        log_file: str = "log.log",
        capture_stdout: bool = False,
    ):
        """Initializes the pingutils class

        Args:
            discord_webhook (str, optional): The discord webhook to use. Default to None
            log (Logger, optional): The logger to use. Default to None
            debug (bool, optional): Whether to use debug mode. Default to False
            level (int, optional): The logging level to use. Default to 20
            timeout (float, optional): Seconds each ping may block on one step. Default to 10
            sentry_dsn (str, optional): The sentry dsn to use. Default to None
            ssdk (sentry_sdk, optional): The sentry_sdk to use. Default to None
            log_file (str, optional): The file to log to. Default to "log.log"
            capture_stdout (bool, optional): Log stray stdout/stderr writes. Default to False
        """
        self.logLevel = level
        if log is None:
            self.logger = Logger(
                debug=debug,
                level=self.logLevel,
                discord_webhook=discord_webhook,
                sentry_dsn=sentry_dsn,
                ssdk=ssdk,
                log_file=log_file,
                capture_stdout=capture_stdout,
            )
        else:
            self.logger = log

        self.text = Text(logger=self.logger)
        self.server = Server(logger=self.logger, text=self.text, timeout=timeout)

    @classmethod
    def from_config(cls, config: Config, **kwargs) -> "Utils":
        return cls(
            discord_webhook=config.discord_webhook,
            debug=config.debug,
            level=config.log_level,
            timeout=config.ping_timeout,
            sentry_dsn=config.sentry_uri,
            **kwargs,
        )
