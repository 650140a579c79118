#!/usr/bin/env python3
"""SpeakWell: record a spoken answer, get it transcribed, scored and saved"""

import argparse
import asyncio
import logging
import sys
import threading
from pathlib import Path

from .adapters.config_env import load_app_config
from .adapters.history_store import JsonHistoryStore
from .adapters.stt import STTAdapter
from .adapters.ui_feedback import UIFeedbackAdapter
from .async_bridge import get_async_bridge
from .config import config
from .core.config_model import AppConfig
from .core.controller import SessionController
from .core.gate import RecordingGate
from .core.pipeline import ProcessingPipeline
from .core.recorder import RecorderSession
from .formatting import format_entry_details, format_history_row, format_timer_line
from .stt_factory import get_available_stt_providers, get_stt_provider_with_fallback

logger = logging.getLogger(__name__)


class SpeakWell:
    """Interactive recorder: Enter (or the hotkey) starts and stops recording"""

    def __init__(self, app_config: AppConfig, use_hotkey: bool = False):
        # PyAudio/pynput are only needed here, not for the history commands
        from .adapters.audio import PyAudioMicrophone
        from .adapters.permissions import InputDevicePermission

        config.create_dirs()
        self.app_config = app_config
        self.bridge = get_async_bridge()
        self.store = JsonHistoryStore(app_config.history_file)
        self.provider = get_stt_provider_with_fallback()

        gate = RecordingGate(app_config.min_duration_seconds)
        self.microphone = PyAudioMicrophone(
            app_config.recordings_dir,
            sample_rate=config.SAMPLE_RATE,
            chunk_size=config.CHUNK_SIZE,
            device=config.MIC_DEVICE,
        )
        self.recorder = RecorderSession(
            self.microphone,
            InputDevicePermission(config.MIC_DEVICE),
            gate,
            max_duration_seconds=app_config.max_duration_seconds,
            on_tick=self._show_timer,
        )
        self.pipeline = ProcessingPipeline(
            STTAdapter(self.provider), self.store, on_busy=self._show_busy
        )
        self.controller = SessionController(
            self.recorder,
            self.pipeline,
            UIFeedbackAdapter(app_config.notifications_enabled),
            gate,
            on_entry=self._show_entry,
        )

        self.keyboard = None
        if use_hotkey:
            from .keyboard_handler import KeyboardHandler

            self.keyboard = KeyboardHandler(self.on_toggle)
        self._shutdown_event = threading.Event()

    def on_toggle(self):
        """Start or stop recording (called from the input threads)"""
        future = self.bridge.submit(self.controller.toggle())
        future.add_done_callback(self._on_toggle_done)

    def _on_toggle_done(self, future):
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            logger.error("Session error: %s", error, exc_info=error)
            print(f"\n❌ Error: {error}")

    def _show_entry(self, entry):
        print("\n" + format_entry_details(entry) + "\n")

    def _show_timer(self, elapsed: int):
        recording = self.microphone.current
        level = recording.level if recording is not None else 0
        line = format_timer_line(elapsed, self.app_config.min_duration_seconds, level)
        print(f"\r{line}      ", end="", flush=True)

    def _show_busy(self, busy: bool):
        if not busy:
            print("✓ Processing finished")

    def run(self):
        """Run the interactive loop"""
        print("\n" + "=" * 50)
        print("🎙 SpeakWell")
        print("=" * 50)
        if self.provider.is_available():
            print(f"Transcription: {self.provider.name}")
        else:
            print("⚠ No transcription provider available")
            if not get_available_stt_providers():
                print("  → Set OPENAI_API_KEY or ELEVENLABS_API_KEY in .env")
        print(
            f"Record between {self.app_config.min_duration_seconds} and "
            f"{self.app_config.max_duration_seconds} seconds"
        )
        print("Press Enter to start/stop recording")
        if self.keyboard:
            print(f"Hotkey: {config.HOTKEY_MODIFIER}+{config.HOTKEY_KEY}")
            self.keyboard.start()
        print("Type q then Enter to quit")
        print("=" * 50 + "\n")

        self.bridge.run_sync(self.store.load())

        try:
            while not self._shutdown_event.is_set():
                line = input()
                if line.strip().lower() in ("q", "quit", "exit"):
                    break
                self.on_toggle()
        except (EOFError, KeyboardInterrupt):
            pass

        self.shutdown()

    def shutdown(self):
        """Discard any recording in progress and stop the loop"""
        print("\nShutting down...")
        self._shutdown_event.set()
        if self.keyboard:
            self.keyboard.stop()
        try:
            self.bridge.run_sync(self.controller.cancel_recording(), timeout=5.0)
        except TimeoutError:
            logger.warning("Timed out releasing the microphone")
        self.bridge.stop()
        print("✓ Done")


def setup_logging(debug: bool, log_dir: Path) -> None:
    """Log to a file under the data directory and warnings to the console"""
    log_dir.mkdir(parents=True, exist_ok=True)

    file_handler = logging.FileHandler(log_dir / "speakwell.log")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if debug else logging.WARNING)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(logging.DEBUG if debug else logging.INFO)
    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)


def show_history(store: JsonHistoryStore) -> int:
    asyncio.run(store.load())
    entries = store.list()
    if not entries:
        print('No recordings yet. Run "speakwell record" to get started!')
        return 0
    print("Recording History")
    for entry in entries:
        print(format_history_row(entry))
    return 0


def show_entry(store: JsonHistoryStore, entry_id: str) -> int:
    asyncio.run(store.load())
    for entry in store.list():
        if entry.id == entry_id:
            print(format_entry_details(entry))
            return 0
    print(f"No recording with id {entry_id}")
    return 1


def delete_entry(store: JsonHistoryStore, entry_id: str) -> int:
    async def _delete() -> bool:
        await store.load()
        return await store.remove(entry_id)

    if asyncio.run(_delete()):
        print(f"✓ Deleted {entry_id}")
        return 0
    print(f"No recording with id {entry_id}")
    return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="speakwell",
        description="SpeakWell - record, transcribe and score your spoken English",
    )
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    commands = parser.add_subparsers(dest="command")

    record = commands.add_parser("record", help="Record a new answer (default)")
    record.add_argument(
        "--hotkey",
        action="store_true",
        help="Also toggle recording with the global hotkey",
    )
    commands.add_parser("history", help="List past recordings")
    show = commands.add_parser("show", help="Show one recording")
    show.add_argument("entry_id")
    delete = commands.add_parser("delete", help="Delete one recording")
    delete.add_argument("entry_id")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    app_config = load_app_config()
    setup_logging(args.debug or app_config.debug, config.LOGS_DIR)

    store = JsonHistoryStore(app_config.history_file)
    if args.command == "history":
        return show_history(store)
    if args.command == "show":
        return show_entry(store, args.entry_id)
    if args.command == "delete":
        return delete_entry(store, args.entry_id)

    app = SpeakWell(app_config, use_hotkey=getattr(args, "hotkey", False))
    app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
