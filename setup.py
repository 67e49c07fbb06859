#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Legacy entry point for hydrofreq; all metadata lives in pyproject.toml.
"""

import setuptools

if __name__ == "__main__":
    setuptools.setup()
