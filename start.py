#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""Entry Point for the executable, without installation."""

import sys

import themesync

if __name__ == "__main__":
    sys.exit(themesync.main())
