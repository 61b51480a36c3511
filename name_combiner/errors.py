"""
Errors raised by the name combination pipeline.

Transport errors raised by the provider SDKs are never wrapped; they reach the
caller as-is so that service failures can be told apart from bad content.
"""


class NameCombinerError(Exception):
    """Base class for pipeline errors"""


class NoTextResponse(NameCombinerError):
    """The model replied, but the reply holds no text content"""

    def __init__(self, message: str = "No text response from model") -> None:
        super().__init__(message)


class MalformedReply(NameCombinerError):
    """The reply text is not a JSON list"""

    def __init__(self, message: str = "Failed to parse name combinations from AI response") -> None:
        super().__init__(message)
