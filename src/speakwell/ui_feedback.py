"""Simple desktop notifications for SpeakWell"""
import subprocess
import sys


def notify(title: str, message: str, timeout: int = 2):
    """Show desktop notification"""
    if sys.platform == "darwin":
        script = f"display notification {_quote(message)} with title {_quote(title)}"
        args = ["osascript", "-e", script]
    elif sys.platform.startswith("linux"):
        args = ["notify-send", "-t", str(timeout * 1000), title, message]
    else:
        return
    try:
        subprocess.run(args, timeout=2, capture_output=True)
    except (OSError, subprocess.SubprocessError):
        pass  # Notifications are optional


def _quote(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'
