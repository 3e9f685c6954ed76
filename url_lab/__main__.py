#!/usr/bin/env python3
"""
Command line interface for url_lab.
"""

from url_lab.cli import cli_main

if __name__ == "__main__":
    cli_main()
