"""
Application settings management.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional

from tagmark.core.errors import SettingsError
from tagmark.core.models import TagSpec


def default_tags() -> list[TagSpec]:
    """The stock tag set: alert, query, commented-out code, todo, highlight."""
    return [
        TagSpec(tags=('!',), style={'color': '#FF2D00', 'backgroundColor': 'transparent'}),
        TagSpec(tags=('?',), style={'color': '#3498DB', 'backgroundColor': 'transparent'}),
        TagSpec(tags=('//',), style={'color': '#474747', 'backgroundColor': 'transparent'},
                strikethrough=True),
        TagSpec(tags=('todo',), style={'color': '#FF8C00', 'backgroundColor': 'transparent'}),
        TagSpec(tags=('*',), style={'color': '#98C379', 'backgroundColor': 'transparent'}),
    ]


@dataclass
class HighlightSettings:
    """Settings consumed by the tag engine."""
    highlight_plain_text: bool = False
    single_line_comments: bool = True
    multiline_comments: bool = True
    doc_style_languages: frozenset[str] = field(default_factory=frozenset)
    tags: list[TagSpec] = field(default_factory=default_tags)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'HighlightSettings':
        """
        Build settings from the editor-style camelCase mapping.

        Unknown keys are ignored. Values of the wrong type fall back to the
        defaults for that field.
        """
        defaults = cls()

        def get_bool(key: str, default: bool) -> bool:
            value = data.get(key, default)
            if isinstance(value, bool):
                return value
            logging.warning(f"HighlightSettings - '{key}' must be a boolean, got {value!r}")
            return default

        languages = data.get('useJSDocStyle', [])
        if not isinstance(languages, (list, tuple)):
            logging.warning(f"HighlightSettings - 'useJSDocStyle' must be a list, got {languages!r}")
            languages = []

        raw_tags = data.get('tags')
        if raw_tags is None:
            tags = defaults.tags
        elif isinstance(raw_tags, list):
            tags = []
            for index, item in enumerate(raw_tags):
                if not isinstance(item, dict):
                    logging.warning(f"HighlightSettings - Ignoring tag #{index}, expected an object, got {item!r}")
                    continue
                tags.append(TagSpec.from_dict(item))
        else:
            logging.warning(f"HighlightSettings - 'tags' must be a list, got {type(raw_tags).__name__}")
            tags = defaults.tags

        return cls(
            highlight_plain_text=get_bool('highlightPlainText', defaults.highlight_plain_text),
            single_line_comments=get_bool('singleLineComments', defaults.single_line_comments),
            multiline_comments=get_bool('multilineComments', defaults.multiline_comments),
            doc_style_languages=frozenset(lang for lang in languages if isinstance(lang, str)),
            tags=tags,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            'highlightPlainText': self.highlight_plain_text,
            'singleLineComments': self.single_line_comments,
            'multilineComments': self.multiline_comments,
            'useJSDocStyle': sorted(self.doc_style_languages),
            'tags': [tag.to_dict() for tag in self.tags],
        }

    def validate(self) -> None:
        """
        Strict check for callers that want errors instead of fallbacks.

        Raises:
            SettingsError: on the first invalid value
        """
        for index, spec in enumerate(self.tags):
            if not spec.tags:
                raise SettingsError(f"Tag #{index} has no identity string")
            for tag in spec.tags:
                if not isinstance(tag, str) or not tag:
                    raise SettingsError(f"Tag #{index} has an empty or non-string identity: {tag!r}")


class SettingsManager:
    """Manager for loading/saving highlight settings."""

    def __init__(self, settings_path: Optional[Path] = None):
        self.settings_path = settings_path or self._get_default_path()
        self._settings: Optional[HighlightSettings] = None
        self._observers: list[Callable[[HighlightSettings], None]] = []

    @staticmethod
    def _get_default_path() -> Path:
        """Get the default settings file path."""
        if os.name == 'nt':
            # Windows
            app_data = os.environ.get('APPDATA', os.path.expanduser('~'))
            return Path(app_data) / 'TagMark' / 'settings.json'
        else:
            # Linux/Mac
            config_home = os.environ.get('XDG_CONFIG_HOME',
                                         os.path.expanduser('~/.config'))
            return Path(config_home) / 'tagmark' / 'settings.json'

    @property
    def settings(self) -> HighlightSettings:
        """Get current settings, loading from disk if needed."""
        if self._settings is None:
            self._settings = self.load()
        return self._settings

    def load(self) -> HighlightSettings:
        """Load settings from disk."""
        if not self.settings_path.exists():
            return HighlightSettings()

        try:
            with open(self.settings_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logging.error(f"SettingsManager - Failed to load {self.settings_path}: {e}")
            return HighlightSettings()

        if not isinstance(data, dict):
            logging.error(f"SettingsManager - Expected an object in {self.settings_path}")
            return HighlightSettings()

        return HighlightSettings.from_dict(data)

    def reload(self) -> HighlightSettings:
        """Re-read settings from disk, make them current and notify observers."""
        self._settings = self.load()
        self._notify_observers()
        return self._settings

    def save(self, settings: Optional[HighlightSettings] = None) -> bool:
        """Save settings to disk."""
        settings = settings or self._settings
        if settings is None:
            return False

        try:
            self.settings_path.parent.mkdir(parents=True, exist_ok=True)

            with open(self.settings_path, 'w', encoding='utf-8') as f:
                json.dump(settings.to_dict(), f, indent=2)
        except OSError as e:
            logging.error(f"SettingsManager - Failed to save {self.settings_path}: {e}")
            return False

        self._settings = settings
        self._notify_observers()
        return True

    def reset(self) -> HighlightSettings:
        """Reset to default settings."""
        self._settings = HighlightSettings()
        self.save()
        return self._settings

    def add_observer(self, callback: Callable[[HighlightSettings], None]) -> None:
        """Add a callback to be notified of settings changes."""
        self._observers.append(callback)

    def remove_observer(self, callback: Callable[[HighlightSettings], None]) -> None:
        """Remove a settings change observer."""
        if callback in self._observers:
            self._observers.remove(callback)

    def _notify_observers(self) -> None:
        """Notify all observers of settings change."""
        for callback in self._observers:
            try:
                callback(self._settings)
            except Exception:
                logging.exception("SettingsManager - Settings observer failed")
