"""
Generic utility functions shared across modules.

Currently the clock abstraction used to inject "now" into period filtering.
"""
