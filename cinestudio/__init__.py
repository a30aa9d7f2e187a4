"""CineStudio generation core

Prepares photographs for a generative image service, drives single and
batch generation requests, and keeps a durable history of results.
"""

__version__ = "0.1.0"
