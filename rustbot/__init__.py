"""IRC bot that runs Rust snippets on the playground and looks up crates."""

__version__ = "0.1.0"
