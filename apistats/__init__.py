"""Statistics about the API surface described by rustdoc JSON indexes."""

__version__ = "0.1.0"
