"""Render HWiNFO-style sensor CSV logs as a RAM/CPU/GPU usage chart."""

__version__ = "0.1.0"
