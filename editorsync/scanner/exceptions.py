class ProbeError(Exception):
    """Raised when a probe cannot tell whether a URL is reachable."""


class ProbeTimeoutError(ProbeError):
    """Raised when a probe is aborted after its deadline."""
