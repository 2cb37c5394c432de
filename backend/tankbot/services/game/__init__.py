"""Game domain services: rules, session lifecycle, actions and the daily tick.

This package contains pure(ish) domain logic that should be imported by
HTTP routes, socket handlers and the chat command layer, keeping transport
concerns separated from core game mechanics.
"""
