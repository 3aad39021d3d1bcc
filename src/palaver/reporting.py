"""User-visible reporting.

Components report through a callback ``callback(level, component, message)``
so the host decides where messages go. The default reporter prints to a
Rich console on stderr.
"""

from collections.abc import Callable

from rich.console import Console
from rich.markup import escape

Reporter = Callable[[str, str, str], None]


class LogLevel:
    """Log level constants with numeric values for comparison.

    Standard logging hierarchy: DEBUG < INFO < WARNING < ERROR
    """

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40

    _from_string = {
        "debug": DEBUG,
        "info": INFO,
        "warning": WARNING,
        "error": ERROR,
    }

    @classmethod
    def from_string(cls, level_str: str) -> int:
        """Convert string to log level. Returns DEBUG if invalid."""
        return cls._from_string.get(level_str.lower(), cls.DEBUG)


_LEVEL_STYLES = {
    "debug": "dim",
    "info": "cyan",
    "warning": "yellow",
    "error": "red",
}


def console_reporter(
    console: Console | None = None,
    threshold: int = LogLevel.WARNING
) -> Reporter:
    """Create a reporter that prints messages at or above ``threshold``.

    Args:
        console: Console to print to (defaults to a stderr console)
        threshold: Minimum LogLevel value to display

    Returns:
        Reporter callback
    """
    con = console or Console(stderr=True)

    def _report(level: str, component: str, message: str) -> None:
        if LogLevel.from_string(level) < threshold:
            return
        style = _LEVEL_STYLES.get(level.lower(), "white")
        con.print(f"[{style}]{escape(component)}: {escape(message)}[/{style}]", highlight=False)

    return _report
