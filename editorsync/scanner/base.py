from abc import ABC, abstractmethod

from editorsync.scanner.models import ProbeResponse


class BaseProber(ABC):
    """Contract for lightweight existence checks of remote resources."""

    @abstractmethod
    async def head(self, url: str) -> ProbeResponse:
        """Issue a HEAD-style request without reading a body.

        Raises:
            ProbeTimeoutError: if the request is aborted after its deadline.
            ProbeError: on any other failure to reach the resource.
        """
