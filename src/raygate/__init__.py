"""
raygate writes the V2Ray daemon configuration from a simplified schema and
controls the Nginx web server that fronts it.
"""

__version__ = "1.0.0"
