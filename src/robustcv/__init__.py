"""
robustcv: robust geometric model estimation from point correspondences.
"""

__version__ = "0.1.0"
