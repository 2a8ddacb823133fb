# -*- coding: utf-8 -*-

from .theme import ThemeClient

__all__ = ['ThemeClient']
