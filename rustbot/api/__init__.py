"""HTTP clients for the external services used by command modules."""

from .cratesio import CratesIOAPI
from .playground import PlaygroundAPI

__all__ = ["CratesIOAPI", "PlaygroundAPI"]
