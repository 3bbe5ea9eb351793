#!/usr/bin/env python3
"""
Convenience entry point for running roomtime directly.

Usage: python -m roomtime [command] [options]
"""

from .cli.app import app

if __name__ == "__main__":
    app()
