"""Exceptions raised by the gateway client."""

from __future__ import annotations


class GatewayError(Exception):
    """Base class for failures talking to the matching gateway."""


class TransportError(GatewayError):
    """Connection refused/reset or a failed send on a channel."""


class ChannelClosedError(GatewayError):
    """The channel closed before the request reached a terminal status."""


class SubmissionError(GatewayError):
    """The one-way request submission was rejected."""


class ResultDecodeError(GatewayError):
    """A reply carried a result of an unexpected shape."""


class ConfigError(ValueError):
    """An environment setting could not be parsed or is inconsistent."""
