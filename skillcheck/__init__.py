"""skillcheck - validate and maintain a corpus of agent skills"""

__version__ = "0.1.0"
