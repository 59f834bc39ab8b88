"""Synthetic trade feed generator with fraud pattern injection"""

__version__ = "0.1.0"
