# !/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Entry point for the commerce starter installer.

Equivalent to the ``storefront-installer`` console script, for running
straight from a checkout: ``python install.py install``.
"""

from installer.cli import main

if __name__ == "__main__":
    main()
