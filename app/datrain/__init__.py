"""datrain - interactive file explorer and removable-media helpers."""

__version__ = "0.1.0"
