"""Water level station map: directory markers and on-demand observed/predicted charts."""

__version__ = "0.1.0"
