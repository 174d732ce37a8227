"""Colored console output for the driver and REPL."""


class ColorPrinter:
    """
    Static helpers that print tagged, ANSI-colored status lines.
    """

    HEADER = "\033[95m"
    BLUE = "\033[94m"
    CYAN = "\033[96m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    RED = "\033[91m"
    GRAY = "\033[90m"
    RESET = "\033[0m"
    BOLD = "\033[1m"

    TRAFFIC_WIDTH = 80

    @staticmethod
    def _emit(color, text):
        print(f"{color}{text}{ColorPrinter.RESET}")

    @staticmethod
    def info(message):
        """Blue ``[INFO]`` line."""
        ColorPrinter._emit(ColorPrinter.BLUE, f"[INFO] {message}")

    @staticmethod
    def success(message):
        """Green ``[SUCCESS]`` line."""
        ColorPrinter._emit(ColorPrinter.GREEN, f"[SUCCESS] {message}")

    @staticmethod
    def warning(message):
        """Yellow ``[WARNING]`` line."""
        ColorPrinter._emit(ColorPrinter.YELLOW, f"[WARNING] {message}")

    @staticmethod
    def error(message):
        """Red ``[ERROR]`` line."""
        ColorPrinter._emit(ColorPrinter.RED, f"[ERROR] {message}")

    @staticmethod
    def header(message):
        """Bold magenta banner framed by rules."""
        rule = "=" * 60
        ColorPrinter._emit(
            ColorPrinter.HEADER + ColorPrinter.BOLD,
            f"\n{rule}\n   {message.upper()}\n{rule}\n",
        )

    @staticmethod
    def cyan(message):
        ColorPrinter._emit(ColorPrinter.CYAN, message)

    @staticmethod
    def traffic(direction, data):
        """
        Show one serial transfer in gray.

        Args:
            direction: ``">>"`` for sent, ``"<<"`` for received
            data: Raw bytes or text; CR and LF are shown escaped
        """
        if isinstance(data, bytes):
            data = data.decode("ascii", errors="replace")
        shown = data.replace("\r", "\\r").replace("\n", "\\n")
        if len(shown) > ColorPrinter.TRAFFIC_WIDTH:
            shown = shown[:ColorPrinter.TRAFFIC_WIDTH - 3] + "..."
        ColorPrinter._emit(ColorPrinter.GRAY, f"{direction} {shown}")

    @staticmethod
    def clamp_report(report):
        """Warn about each clamped waveform sample, then summarize."""
        for event in report.events:
            ColorPrinter.warning(
                f"line {event.line}: sample {event.value} clamped to {event.bound} "
                f"(adjusted by {event.adjustment:+d})"
            )
        if report:
            ColorPrinter.warning(report.summary())
