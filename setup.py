#!/usr/bin/env python
"""
Setup script for Gait Sync
Uses pyproject.toml for configuration (PEP 517/518)
"""

from setuptools import setup

# Configuration is in pyproject.toml
setup()
