"""MediaBridge - shared storage publishing and file sharing bridge."""

__version__ = "1.0.0"
