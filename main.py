#!/usr/bin/env python3
"""
SCAP Scan Driver Entry Point
"""
from scapdriver.cli import cli

if __name__ == '__main__':
    cli()
