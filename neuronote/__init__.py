"""NeuroNote - turn study material into study packs"""

__version__ = "1.0.0"
