#!/usr/bin/env python3
"""
Main entry point for rustbot when run from a source checkout
"""

from rustbot.main import run

if __name__ == "__main__":
    run()
