"""
Preferences management for the editor.

Preferences live in a JSON file in the user's application data directory,
``%APPDATA%`` on Windows and ``~/.config`` elsewhere.
"""


import json
import os
from dataclasses import asdict
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from typing import Optional
from typing import Union

from rindent.core import broker
from rindent.core import log


JSON_TYPE = Union[dict, list, int, float, bool, str, None]

_APPDATA_PATH = Path(os.environ.get('APPDATA', Path.home() / '.config'))

RINDENT_APPDATA_PATH = Path(_APPDATA_PATH, 'Rindent')
RINDENT_PREFERENCES_PATH = Path(RINDENT_APPDATA_PATH, 'Preferences.json')


logger = log.get_logger(__name__)

broker.register_source('SYSTEM')


class AppdataError(Exception):
    """Errors for unhandled appdata values."""


def export_data_to_json(path: Path, data: dict, overwrite: bool = False) -> None:
    """
    Export dict to JSON file path.

    Args:
        path (Path): the file path to place the .json file.
        data (dict): the data to export into the .json file.
        overwrite (bool): to overwrite JSON file if it already exists in path.
            Defaults to False.
    """
    if path.exists() and not overwrite:
        return

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as outfile:
        json.dump(data, outfile, indent=4)


def import_data_from_json(filepath: Path) -> Optional[dict]:
    """
    Import data from a .json file.

    Args:
        filepath (Path): the filepath to the JSON file to extract data from.
    Returns:
        Optional[dict]: will return data if JSON file exists and holds an
            object, else None.
    """
    if not filepath.exists():
        return None

    with open(filepath) as file:
        try:
            data = json.load(file)
        except json.JSONDecodeError:
            logger.warning('Ignoring malformed preferences file %s', filepath)
            return None

    if not isinstance(data, dict):
        return None
    return data


# -----Code Editor-------------------------------------------------------------

TAB_TYPE_SPACE = 'space'
TAB_TYPE_TAB = 'tab'


@dataclass
class CodePreferences(object):
    """Indentation and editing behaviour."""
    tab_type: str = TAB_TYPE_SPACE
    tab_space_width: int = 8
    indent_width: int = 2
    """Width of one indent level. Zero or less uses ``tab_space_width``."""
    enable_auto_indent: bool = True

    @property
    def insert_spaces(self) -> bool:
        if self.tab_type == TAB_TYPE_SPACE:
            return True
        elif self.tab_type == TAB_TYPE_TAB:
            return False
        else:
            raise AppdataError(f'Unknown tab type from preferences: {self.tab_type!r}')

    @property
    def effective_indent_width(self) -> int:
        if self.indent_width <= 0:
            return self.tab_space_width
        return self.indent_width


@dataclass
class RubyCodeColor(object):
    """Syntax highlighting colors for Ruby."""
    keyword: str = '#00ffff'
    operator: str = '#ffffff'
    brace: str = '#ffa500'
    string: str = '#90ee90'
    comment: str = '#ff00ff'
    numbers: str = '#ff00ff'
    symbol: str = '#ffd700'
    instance_variable: str = '#ffa500'
    constant: str = '#87cefa'
    def_: str = '#00ffff'


# -----Primary Preferences-----------------------------------------------------

class Preferences(object):
    """
    Singleton container holding all preferences data for the application.

    Checks appdata for preferences file. If the file is found, class populates
    itself from file contents. Otherwise, file is created using class defaults.
    """

    _instance: Optional['Preferences'] = None

    def __new__(cls, *args: Any, **kwargs: Any) -> 'Preferences':
        if cls._instance is None:
            cls._instance = super(Preferences, cls).__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        # Prevent re-initialization on subsequent calls
        if getattr(self, '_initialized', False):
            return
        self._initialized = True

        # Defaults
        self.code_preferences: CodePreferences = CodePreferences()
        self.ruby_code_color: RubyCodeColor = RubyCodeColor()

        # First-time load from disk (if present), else create defaults
        if RINDENT_PREFERENCES_PATH.exists():
            self.load()
        else:
            self.save()

    @classmethod
    def reset(cls) -> None:
        """Drop the singleton so the next access reloads from disk."""
        cls._instance = None

    def to_dict(self) -> dict[str, JSON_TYPE]:
        """Serialize to a plain dict."""
        return {
            'code_preferences': asdict(self.code_preferences),
            'ruby_code_color': asdict(self.ruby_code_color)
        }

    def from_dict(self, data: dict[str, JSON_TYPE]) -> None:
        """
        Apply a serialized dict into dataclass fields.

        Raises:
            AppdataError: If a section holds keys the dataclass does not know.
        """
        sections = {
            'code_preferences': CodePreferences,
            'ruby_code_color': RubyCodeColor,
        }
        for name, cls in sections.items():
            if name not in data:
                continue
            try:
                setattr(self, name, cls(**data[name]))
            except TypeError as e:
                raise AppdataError(f'Invalid preferences section {name!r}') from e

    def load(self) -> None:
        """
        Load in data from user appdata file if it can be found. Invalid
        sections are reported and left at their defaults.
        """
        data = import_data_from_json(RINDENT_PREFERENCES_PATH)
        if data is None:
            return

        try:
            self.from_dict(data)
        except AppdataError:
            logger.warning('Preferences file %s is invalid', RINDENT_PREFERENCES_PATH, exc_info=True)

    def save(self) -> None:
        """
        Save current data to user's appdata folder.
        Emit event signaling a potential update to preference data.
        Emitted data is None as the preference singleton can be accessed from
        anywhere.
        """
        export_data_to_json(RINDENT_PREFERENCES_PATH, self.to_dict(), True)
        event = broker.Event('SYSTEM', 'PREFERENCES_UPDATED')
        broker.emit(event)


def initialize() -> None:
    """Call on startup to ensure the preferences singleton is loaded."""
    _ = Preferences()  # Ensures singleton is populated by constructor.
