"""Sizes of the messages a streaming source produces."""

from __future__ import annotations


class MessageSizeDistribution:
    """Base message-size model; subclasses supply the size."""

    def msg_size(self) -> float:
        """Return the size of the next message."""
        raise NotImplementedError(
            "Source message size distribution function is not implemented."
        )


class FixedMessageSizeDistribution(MessageSizeDistribution):
    """Every message has the same configured size."""

    def __init__(self, msgsize: float) -> None:
        self._size = float(msgsize)

    def msg_size(self) -> float:
        return self._size