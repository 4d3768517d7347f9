"""Version information for the Callout SDK"""

__version__ = "0.1.0"
