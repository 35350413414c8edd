"""
shipflow: run shell steps locally or over ssh, stopping at the first failure.
"""

__version__ = "0.1.0"
