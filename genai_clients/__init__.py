"""
Thin async clients for generative AI HTTP APIs (OpenAI, Stability AI, Picogen).
"""

__version__ = "1.0.0"
