import re
import traceback

import unicodedata

from .pycraft2.status import ServerStatus


class Text:
    def __init__(self, logger):
        """Initializes the text class

        Args:
            logger (Logger): The logger class
        """
        self.logger = logger

    @staticmethod
    def c_filter(text: str, trim: bool = True) -> str:
        """Removes all color bits from a string

        Args:
            text [str]: The string to remove color bits from
            trim [bool]: Whether to trim the string or not

        Returns:
            [str]: The string without color bits
        """
        text = re.sub(r"§[0-9a-fk-or]?", "", text)
        if trim:
            text = text.strip()

        text = text.replace("@", "@ ")  # fix @ mentions

        # escape all control chars, keeping line breaks
        text = "".join(
            char.encode("unicode_escape").decode("utf-8")
            if unicodedata.category(char) in ("Cc", "Cf", "Cn", "Co", "Cs")
            and char != "\n"
            else char
            for char in text
        )

        return text

    def motd_parse(self, motd) -> str:
        """Flattens a raw description (string or chat component) to text

        Args:
            motd (str | dict): The description as sent by the server

        Returns:
            str: The text of the component and all of its extras
        """
        try:
            if not motd:
                return ""

            if isinstance(motd, str):
                return motd

            def parse_extra(extra):
                _text = ""
                for ext in extra:
                    if isinstance(ext, str):
                        _text += ext
                        continue
                    _text += ext.get("text", "")
                    if "extra" in ext:
                        _text += parse_extra(ext["extra"])
                return _text

            text = motd.get("text", "")
            if "extra" in motd:
                text += parse_extra(motd["extra"])

            return text
        except (TypeError, AttributeError):
            self.logger.error(f"Failed to parse motd (motd: {motd})")
            self.logger.error(traceback.format_exc())
            return ""

    def status_message(self, status: ServerStatus) -> str:
        """Renders a status the way the bot's `online` command shows it

        Args:
            status (ServerStatus): The status to render

        Returns:
            str: The markdown message
        """
        description = status.description.text()
        extra = getattr(status.description, "extra", None)
        if extra:
            description = self.motd_parse({"text": description, "extra": extra})

        player_list = ""
        if status.players.sample:
            player_list = "\n**Players online:** " + ", ".join(
                self.c_filter(player.name) for player in status.players.sample
            )

        return (
            "**Minecraft Server Status** 🎮\n"
            f"**Version:** {self.c_filter(status.version.name)}\n"
            f"**Players:** {status.players.online}/{status.players.max}\n"
            f"**Description:** {self.c_filter(description)}"
            f"{player_list}"
        )

    @staticmethod
    def error_message(err: Exception) -> str:
        return f"❌ Failed to connect to server: {err}"
