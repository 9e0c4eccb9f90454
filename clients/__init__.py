from .opinion import OpinionClient, OpinionError, TransportError, UpstreamError, UpstreamResponse

__all__ = [
    "OpinionClient",
    "OpinionError",
    "TransportError",
    "UpstreamError",
    "UpstreamResponse",
]
