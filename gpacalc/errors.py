"""
Exceptions raised for invalid user input.
"""

from __future__ import annotations


class InputError(ValueError):
    """
    A user-facing validation failure.

    message_key is a translation key; the UI looks it up and shows it
    as a blocking alert. Nothing is mutated when this is raised.
    """

    def __init__(self, message_key: str) -> None:
        super().__init__(message_key)
        self.message_key = message_key
