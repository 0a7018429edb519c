# -*- coding: utf-8 -*-
"""
mastoclean - scheduled maintenance for Mastodon instances.

Sequences tootctl and `rails runner` invocations to purge blocked domains,
prune accounts, expire media and report instance health.
"""

from mastoclean.constants import VERSION

__version__ = VERSION
