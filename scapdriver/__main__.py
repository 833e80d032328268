#!/usr/bin/env python3
"""
Entry point for `python -m scapdriver`
"""
from scapdriver.cli import cli

if __name__ == "__main__":
    cli()
