"""Chat transport abstraction."""

from .protocols import ChatClientProtocol

__all__ = ["ChatClientProtocol"]
