"""
Post-operative eye surgery complication risk engine.
"""
__version__ = "1.0.0"
