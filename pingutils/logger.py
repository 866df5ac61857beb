import asyncio
import inspect
import logging
import re
import sys
import time

import aiohttp
import sentry_sdk

norm = sys.stdout


class StreamToLogger:
    """
    Fake file-like stream object that redirects writes to a logger instance.
    """

    def __init__(self, logger, level: int = logging.INFO):
        self.logger = logger
        self.level = level

    def write(self, buf):
        for line in buf.rstrip().splitlines():
            self.logger.log(self.level, line.rstrip())

    def flush(self):
        pass


def filter_msg(msg: str) -> str | None:
    """Drop noise lines (blank lines, traceback carets) unless they report an error"""
    if any(
        (
            msg.strip() == "",
            re.match(r"^\s*\^+\s*$", msg) is not None,
            "heartbeat" in msg.lower(),
        )
    ) and not any(
        (
            "exception" in msg.lower(),
            "raised" in msg.lower(),
            "error" in msg.lower(),
        )
    ):
        return
    return msg


class FilteredFileHandler(logging.FileHandler):
    def emit(self, record):
        if filter_msg(record.getMessage()) is None:
            return
        super().emit(record)


class Logger:
    def __init__(
        self,
        debug=False,
        level: int = logging.INFO,
        discord_webhook: str = None,
        sentry_dsn: str = None,
        ssdk: sentry_sdk = None,
        log_file: str = "log.log",
        capture_stdout: bool = False,
    ):
        """Initializes the logger class

        Args:
            debug (bool, optional): Show debugging. Defaults to False.
            level (int, optional): The logging level. Defaults to logging.INFO.
            discord_webhook (str, optional): Webhook that critical messages are sent to. Defaults to None.
            sentry_dsn (str, optional): Sentry dsn to init sentry_sdk with. Defaults to None.
            ssdk (sentry_sdk, optional): An already initialised sentry_sdk. Defaults to None.
            log_file (str, optional): The file to log to. Defaults to "log.log".
            capture_stdout (bool, optional): Send stray stdout/stderr writes to the log file. Defaults to False.
        """
        self.__last_print = None
        self.DEBUG = debug
        self.logging = logging
        self.webhook = discord_webhook
        self.log_file = log_file

        self.clear()
        logging.basicConfig(
            level=level if not self.DEBUG else logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%d-%b %H:%M:%S",
            handlers=[
                FilteredFileHandler(log_file, mode="a", encoding="utf-8", delay=False),
            ],
        )

        if capture_stdout:
            sys.stdout = StreamToLogger(logging.getLogger("STDOUT"), logging.INFO)
            sys.stderr = StreamToLogger(logging.getLogger("STDERR"), logging.ERROR)

        if self.DEBUG:
            self.logging.info("Debugging enabled")

        if sentry_dsn is not None and ssdk is None:
            sentry_sdk.init(
                dsn=sentry_dsn,
                traces_sample_rate=1.0,
            )
            self.sentry_sdk = sentry_sdk
        elif ssdk is not None:
            self.sentry_sdk = ssdk
        else:
            self.sentry_sdk = None

    @staticmethod
    def stack_trace(stack):
        """Returns the calling module and function, like ``server.status``"""
        return (
            stack[1].filename.replace("\\", "/").split("/")[-1].split(".")[0]
            + "."
            + f"{stack[1].function}"
        )

    def info(self, message):
        """Same level as print but no console output"""
        message = f"[{self.stack_trace(inspect.stack())}] {message}"
        self.logging.info(message)

    def error(self, *message, **kwargs):
        message = " ".join([str(arg) for arg in message])
        message = f"[{self.stack_trace(inspect.stack())}] {message}"
        self.logging.error(message, **kwargs)
        self.print(message, log=False)

    def critical(self, *message):
        message = " ".join([str(arg) for arg in message])
        message = f"[{self.stack_trace(inspect.stack())}] {message}"
        self.logging.critical(message)
        self.hook(message)
        self.print(message, log=False)

    def debug(self, *args, **kwargs):
        msg = " ".join([str(arg) for arg in args])
        msg = f"[{self.stack_trace(inspect.stack())}] {msg}"
        self.logging.debug(msg)
        if self.DEBUG:
            self.print(*args, **kwargs, log=False)

    def exception(self, message):
        """Logs ``message`` with the traceback being handled and sends it to the webhook"""
        message = f"[{self.stack_trace(inspect.stack())}] {message}"
        self.logging.exception(message)
        self.hook(message)
        self.print(message, log=False)

    def warning(self, message):
        message = f"[{self.stack_trace(inspect.stack())}] {message}"
        self.print(message, log=False)
        self.logging.warning(message)

    def print(self, *args, log=True, **kwargs):
        msg = " ".join([str(arg) for arg in args])
        msg = filter_msg(msg)

        if msg is None:
            return

        stack_tr = self.stack_trace(inspect.stack())
        if not stack_tr.lower().startswith("logger."):
            msg = f"[{stack_tr}] {msg}"

        # prevent duplicate messages and spamming the console
        if self.__last_print != msg:
            self.__last_print = msg
            print(msg, file=norm, **kwargs)

        if log:
            self.logging.info(msg)

    def hook(self, message: str):
        if not self.webhook:
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(self.async_hook(message))
        else:
            loop.create_task(self.async_hook(message))

    async def async_hook(self, message: str):
        message = filter_msg(message)
        if self.webhook is not None and self.webhook != "" and message is not None:
            try:
                async with aiohttp.ClientSession() as session, session.post(
                    self.webhook,
                    json={
                        "content": message,
                    },
                ) as resp:
                    if resp.status != 204:
                        self.logging.error(
                            f"Failed to send message to webhook ({resp.status}): {message}"
                        )
            except aiohttp.ClientError as err:
                self.logging.error(f"Failed to reach webhook: {err}")

    def __repr__(self):
        return f"Logger(debug={self.DEBUG}, log_file={self.log_file!r})"

    def clear(self):
        with open(self.log_file, "w", encoding="utf-8") as f:
            f.write("")

    def timer(self, func: callable, *args, **kwargs):
        if inspect.iscoroutinefunction(func):
            self.error("Function is a coroutine")
            return

        start = time.perf_counter()
        try:
            if self.sentry_sdk is not None:
                with sentry_sdk.start_transaction(
                    name=f"{func.__name__}", op=f"{func.__name__}"
                ):
                    return func(*args, **kwargs)
            return func(*args, **kwargs)
        finally:
            tDelta = self.auto_range_time(time.perf_counter() - start)
            self.debug(f"Function {func.__name__} took {tDelta}")

    @staticmethod
    def auto_range_time(seconds: float) -> str:
        """
        Returns a time string for a given number of seconds

        Args:
            seconds (float): The number of seconds

        Returns:
            str: The time string
        """

        units = {
            "hr": str(int(seconds // 3600)),
            "min": str(int(seconds // 60)),
            "s": str(int(seconds)),
            "ms": str(int(seconds * 1000)),
            "us": str(int(seconds * 1000000)),
            "ns": str(int(seconds * 1000000000)),
        }

        best = ("ns", units["ns"])
        units = sorted(units.items(), key=lambda x: len(x[1]))
        for unit in units:
            if unit[1] != "0":
                best = unit
                break

        return f"{best[1]} {best[0]}"
