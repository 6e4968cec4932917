"""UI styling utilities for UniApp.

This module provides:
    - Theme: supported UI themes (light, dark), following the platform color scheme
    - Size: standardized size constants and scaling logic
    - Color: standardized color palette for widgets and themes
    - init_stylesheet / apply_theme: expand and apply the bundled style sheet
"""
import enum
import logging
import os
import pathlib
import re

from PySide6 import QtWidgets, QtGui, QtCore

STYLESHEET_PATH: pathlib.Path = pathlib.Path(__file__).parent.parent / 'config' / 'stylesheet.qss'
DISABLE_STYLESHEET_ENV_KEY: str = 'UNIAPP_DISABLE_STYLESHEET'


class Theme(enum.StrEnum):
    Light = 'light'
    Dark = 'dark'


def get_theme() -> Theme:
    """Return the theme matching the platform's color scheme."""
    app = QtWidgets.QApplication.instance()
    if app is None:
        return Theme.Light
    if app.styleHints().colorScheme() == QtCore.Qt.ColorScheme.Dark:
        return Theme.Dark
    return Theme.Light


class Size(enum.Enum):
    """Enumeration of size values used for UI scaling."""
    SmallText = 11.0
    MediumText = 12.0
    LargeText = 16.0
    HugeText = 48.0
    Margin = 18.0
    RowHeight = 34.0
    NavWidth = 180.0
    DefaultWidth = 640.0
    DefaultHeight = 480.0

    def __new__(cls, value):
        obj = object.__new__(cls)
        obj._value_ = float(value)
        return obj

    def __call__(self, multiplier=1.0):
        """
        Returns the size in device-independent pixels.

        Args:
            multiplier (float): A multiplier to apply to the size.

        Returns:
            int: The size, rounded to whole pixels.
        """
        return round(self._value_ * float(multiplier))


class Color(enum.Enum):
    """Enumeration of colours used across the UI."""

    DarkBackground = {
        Theme.Light.value: (220, 220, 220),
        Theme.Dark.value: (45, 45, 45),
    }
    Background = {
        Theme.Light.value: (240, 240, 240),
        Theme.Dark.value: (65, 65, 65),
    }
    SecondaryText = {
        Theme.Light.value: (70, 70, 70),
        Theme.Dark.value: (185, 185, 185),
    }
    Text = {
        Theme.Light.value: (30, 30, 30),
        Theme.Dark.value: (225, 225, 225),
    }
    Blue = {
        Theme.Light.value: (0, 50, 100),
        Theme.Dark.value: (88, 138, 180),
    }

    def __new__(cls, v):
        if not isinstance(v, dict):
            raise ValueError(f'Invalid color value: {v}. Must be a dictionary, got {type(v)}: {v}')
        obj = object.__new__(cls)
        obj._value_ = v
        return obj

    def __call__(self, qss=False):
        """
        Returns a QColor or CSS rgba string.

        Args:
            qss (bool): If True, returns a CSS rgba string suitable for QSS.

        Returns:
            QColor or str: A QColor instance if qss=False, otherwise a CSS rgba string.
        """
        color = QtGui.QColor(*self._value_[get_theme().value])
        if not qss:
            return color
        return self.rgb(color)

    @staticmethod
    def rgb(color):
        """Returns the CSS rgba string for a QColor."""
        rgb = [str(f) for f in color.getRgb()]
        return f'rgba({",".join(rgb)})'


def init_stylesheet():
    """Loads and expands the custom style sheet used by the app.

    Tokens in the template are written as ``<Name>`` for colors and ``<Name@multiplier>``
    for sizes, e.g. ``<Text>`` or ``<Margin@0.5>``.

    Returns:
        str: The style sheet.

    """
    if not QtWidgets.QApplication.instance():
        raise RuntimeError('init_stylesheet() must be called after a QApplication is initiated.')

    if not STYLESHEET_PATH.is_file():
        raise FileNotFoundError(f'Style sheet file not found: {STYLESHEET_PATH}')

    qss = STYLESHEET_PATH.read_text(encoding='utf-8')

    def expand(match):
        name, multiplier = match.group(1), match.group(2)
        if multiplier is None and name in Color.__members__:
            return Color[name](qss=True)
        if multiplier is not None and name in Size.__members__:
            return str(Size[name](float(multiplier)))
        raise KeyError(f'Unknown style sheet token: {match.group(0)}')

    return re.sub(r'<(\w+)(?:@(\d+(?:\.\d+)?))?>', expand, qss)


def apply_theme() -> None:
    """Set the style sheet for the entire app.

    This function should be called after the QApplication is created.

    """
    if not QtWidgets.QApplication.instance():
        raise RuntimeError('apply_theme() must be called after a QApplication is initiated.')

    if os.environ.get(DISABLE_STYLESHEET_ENV_KEY, '').lower() in ['1', 'true', 'yes']:
        logging.warning('Stylesheet disabled by environment variable.')
        return

    qss = init_stylesheet()
    QtWidgets.QApplication.instance().setStyleSheet(qss)
