#!/usr/bin/env python3
"""
Command line interface for html2md.
"""

from html2md.cli import cli_main

if __name__ == "__main__":
    cli_main()
