"""
purelift: gym tracker with progressive overload and weekly volume goals.
"""

__version__ = "0.1.0"
