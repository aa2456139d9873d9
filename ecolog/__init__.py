"""EcoLog: sustainability action logging and impact tracking."""

__version__ = "0.1.0"
