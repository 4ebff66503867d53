"""
Code Explainer: recognize code in images, explain it, and show it highlighted.
"""

__version__ = "1.0.0"
