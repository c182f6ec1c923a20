"""Base reporter interface."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from urlbuilder.models import GeneratedUrl


class Reporter(ABC):
    """Abstract base class for generated URL reporters."""

    @abstractmethod
    def on_url_generated(self, result: "GeneratedUrl") -> None:
        """Called when a URL has been built."""
        pass

    @abstractmethod
    def on_error(self, message: str) -> None:
        """Called when a URL could not be built."""
        pass
