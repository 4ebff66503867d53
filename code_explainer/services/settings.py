"""
Application settings management.

Settings are stored as JSON; secrets (the Gemini API key) are read from the
environment, optionally populated from a ``.env`` file, and never saved.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, asdict
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional

from dotenv import load_dotenv


logger = logging.getLogger(__name__)

API_KEY_VARIABLES = ('GEMINI_API_KEY', 'GOOGLE_API_KEY')


class Theme(Enum):
    """UI theme options."""
    SYSTEM = "system"
    LIGHT = "light"
    DARK = "dark"

    @classmethod
    def from_string(cls, value: str) -> 'Theme':
        """Create from string value."""
        try:
            # Try to match by value
            for theme in cls:
                if theme.value == value.lower():
                    return theme
            # Try to match by name
            return cls[value.upper()]
        except (KeyError, AttributeError):
            return cls.SYSTEM


@dataclass
class OcrSettings:
    """Settings for text recognition."""
    tesseract_cmd: str = ""             # Empty: use tesseract from PATH
    language: str = "eng"
    page_segmentation_mode: int = 6     # Assume a uniform block of text
    preserve_interword_spaces: bool = True
    upscale_below_width: int = 1000     # Small screenshots are upscaled 2x
    camera_index: int = 0


@dataclass
class ExplainerSettings:
    """Settings for the AI explanation service."""
    model: str = "gemini-2.0-flash"
    max_code_chars: int = 20000
    prompt_template: str = (
        "Explain the following code. Describe what it does, walk through the "
        "important parts, and point out anything that looks like a bug or an "
        "OCR recognition mistake. Keep the explanation concise.\n\n"
        "```\n{code}\n```"
    )


@dataclass
class HighlightSettings:
    """Settings for the code highlighter."""
    color_scheme: str = "Default Dark"
    carry_block_comments: bool = False
    highlight_async_threshold: int = 200_000   # Characters


@dataclass
class UISettings:
    """User interface settings."""
    theme: Theme = Theme.DARK
    font_family: str = "Consolas"
    font_size: int = 11
    window_width: int = 900
    window_height: int = 800
    last_directory: str = ""


@dataclass
class ApplicationSettings:
    """Main application settings container."""
    ocr: OcrSettings = field(default_factory=OcrSettings)
    explainer: ExplainerSettings = field(default_factory=ExplainerSettings)
    highlight: HighlightSettings = field(default_factory=HighlightSettings)
    ui: UISettings = field(default_factory=UISettings)


def load_api_key(env_file: Optional[Path] = None) -> Optional[str]:
    """
    Get the Gemini API key from the environment.

    Values from ``env_file`` (or a ``.env`` found from the working directory)
    are loaded first without overriding variables that are already set.
    """
    if env_file is not None:
        load_dotenv(env_file, override=False)
    else:
        load_dotenv(override=False)

    for name in API_KEY_VARIABLES:
        value = os.environ.get(name, "").strip()
        if value:
            return value
    return None


class SettingsManager:
    """Manager for loading/saving application settings."""

    def __init__(self, settings_path: Optional[Path] = None):
        self.settings_path = settings_path or self._get_default_path()
        self._settings: Optional[ApplicationSettings] = None
        self._observers: list[Callable[[ApplicationSettings], None]] = []

    @staticmethod
    def _get_default_path() -> Path:
        """Get the default settings file path."""
        if os.name == 'nt':
            # Windows
            app_data = os.environ.get('APPDATA', os.path.expanduser('~'))
            return Path(app_data) / 'CodeExplainer' / 'settings.json'
        else:
            # Linux/Mac
            config_home = os.environ.get('XDG_CONFIG_HOME',
                                         os.path.expanduser('~/.config'))
            return Path(config_home) / 'code-explainer' / 'settings.json'

    @property
    def settings(self) -> ApplicationSettings:
        """Get current settings, loading from disk if needed."""
        if self._settings is None:
            self._settings = self.load()
        return self._settings

    def load(self) -> ApplicationSettings:
        """Load settings from disk, falling back to defaults."""
        if not self.settings_path.exists():
            return ApplicationSettings()

        try:
            with open(self.settings_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read settings from {self.settings_path}: {e}")
            return ApplicationSettings()

        if not isinstance(data, dict):
            logger.warning(f"Ignoring malformed settings file {self.settings_path}")
            return ApplicationSettings()

        return self._from_dict(data)

    def save(self, settings: Optional[ApplicationSettings] = None) -> bool:
        """Save settings to disk."""
        settings = settings or self._settings
        if settings is None:
            return False

        try:
            self.settings_path.parent.mkdir(parents=True, exist_ok=True)

            data = self._to_dict(settings)

            with open(self.settings_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            logger.error(f"Could not save settings to {self.settings_path}: {e}")
            return False

        self._settings = settings
        self._notify_observers()
        return True

    def reset(self) -> ApplicationSettings:
        """Reset to default settings."""
        self._settings = ApplicationSettings()
        self.save()
        return self._settings

    def add_observer(self, callback: Callable[[ApplicationSettings], None]) -> None:
        """Add a callback to be notified of settings changes."""
        self._observers.append(callback)

    def remove_observer(self, callback: Callable[[ApplicationSettings], None]) -> None:
        """Remove a settings change observer."""
        if callback in self._observers:
            self._observers.remove(callback)

    def _notify_observers(self) -> None:
        """Notify all observers of settings change."""
        for callback in self._observers:
            try:
                callback(self._settings)
            except Exception:
                logger.exception("Settings observer failed")

    def remember_directory(self, path: Path | str) -> None:
        """Remember the directory of the last opened image."""
        directory = Path(path)
        if not directory.is_dir():
            directory = directory.parent
        self.settings.ui.last_directory = str(directory)
        self.save()

    def _to_dict(self, settings: ApplicationSettings) -> dict:
        """Convert settings to dictionary for JSON serialization."""
        def convert(obj: Any) -> Any:
            if isinstance(obj, Enum):
                return obj.name
            elif isinstance(obj, dict):
                return {k: convert(v) for k, v in obj.items()}
            elif isinstance(obj, list):
                return [convert(item) for item in obj]
            else:
                return obj

        return convert(asdict(settings))

    def _from_dict(self, data: dict) -> ApplicationSettings:
        """Convert dictionary back to settings objects."""
        def section(name: str, cls: type) -> Any:
            values = data.get(name, {})
            if not isinstance(values, dict):
                return cls()
            known = {k: v for k, v in values.items() if k in cls.__dataclass_fields__}
            return cls(**known)

        ui = section('ui', UISettings)
        if isinstance(ui.theme, str):
            ui.theme = Theme.from_string(ui.theme)

        return ApplicationSettings(
            ocr=section('ocr', OcrSettings),
            explainer=section('explainer', ExplainerSettings),
            highlight=section('highlight', HighlightSettings),
            ui=ui,
        )
