"""
Weighted Markov chain service: word-sequence chains with sentinel-bounded
generation, JSON persistence and a small HTTP API.
"""

__version__ = "1.0.0"
