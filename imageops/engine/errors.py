"""Errors raised by the image engine."""


class EngineError(Exception):
    """The engine could not decode, transform or encode an image.

    The message is meant to be shown to API clients unchanged.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
