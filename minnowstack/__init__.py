"""User-space TCP building blocks: byte streams, reassembly, wrapping sequence numbers, sender and receiver."""

__version__ = "0.1.0"