"""credmode - cloud credential capability annotator"""

__version__ = "0.1.0"
