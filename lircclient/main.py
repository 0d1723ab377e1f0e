#!/usr/bin/env python3
"""
Main entry point for the lirc-client command line tool.

Delegates to the Typer app in lircclient.ui.cli so the console script
mapping stays stable.
"""

from lircclient.ui.cli import run as lirc_client


if __name__ == "__main__":
    lirc_client()
