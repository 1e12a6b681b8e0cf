"""Common handler utilities and base classes.

Provides the event handler base class, logging, configuration and the
exception hierarchy shared by all handlers.
"""
