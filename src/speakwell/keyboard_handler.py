"""Global hotkey for starting and stopping a recording"""
import logging

from pynput import keyboard
from pynput.keyboard import Key

from .config import config

logger = logging.getLogger(__name__)

_MODIFIERS = {
    "alt": (Key.alt, Key.alt_l, Key.alt_r),
    "ctrl": (Key.ctrl, Key.ctrl_l, Key.ctrl_r),
    "shift": (Key.shift, Key.shift_l, Key.shift_r),
}


class KeyboardHandler:
    """Calls ``on_toggle`` once each time the configured hotkey is pressed"""

    def __init__(self, on_toggle_callback, modifier=None, key=None):
        self.on_toggle = on_toggle_callback
        self.modifier = (modifier or config.HOTKEY_MODIFIER).lower().split("_")[0]
        self.key = (key or config.HOTKEY_KEY).lower()
        self.listener = None
        self.pressed_keys = set()
        self.hotkey_active = False

    def start(self):
        """Start keyboard listener"""
        self.listener = keyboard.Listener(
            on_press=self._on_press,
            on_release=self._on_release
        )
        self.listener.start()

    def stop(self):
        """Stop keyboard listener"""
        if self.listener:
            self.listener.stop()

    def _on_press(self, key):
        self.pressed_keys.add(self._normalize(key))

        # Trigger once per press
        if self._is_hotkey_pressed() and not self.hotkey_active:
            self.hotkey_active = True
            if self.on_toggle:
                try:
                    self.on_toggle()
                except Exception as e:
                    logger.error("Hotkey callback failed: %s", e)

    def _on_release(self, key):
        self.pressed_keys.discard(self._normalize(key))

        # Reset hotkey state when modifier released
        if key in _MODIFIERS.get(self.modifier, ()):
            self.hotkey_active = False

    @staticmethod
    def _normalize(key):
        char = getattr(key, "char", None)
        return char.lower() if char else key

    def _is_hotkey_pressed(self) -> bool:
        modifiers = _MODIFIERS.get(self.modifier, ())
        if modifiers and not any(m in self.pressed_keys for m in modifiers):
            return False
        return self.key in self.pressed_keys
