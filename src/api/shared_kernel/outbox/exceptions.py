"""Exceptions for the outbox pattern."""


class PublishError(Exception):
    """Raised when a broker does not accept a message.

    The relay treats this like any other publish failure: the entry stays
    pending, its retry count grows, and it is dead-lettered after the
    configured number of attempts.
    """

    def __init__(self, message: str, stream: str | None = None):
        super().__init__(message)
        self.stream = stream
