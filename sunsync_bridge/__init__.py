"""Publish SunSync inverter readings as Home Assistant sensor states."""

from .config import APP_VERSION as __version__
