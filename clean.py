#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
clean.py - scheduled maintenance for a Mastodon instance.

Run from the Mastodon installation directory:

    ./clean.py --maintenance --log-file
    ./clean.py --dry-run --domains
"""

from mastoclean.cli import run

if __name__ == "__main__":
    run()
