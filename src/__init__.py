"""
Weather Plugin Host - Sample plugin and reference host binding

A sample weather forecast plugin implementing a host-defined lifecycle
contract, together with a FastAPI-based reference host that drives it.
"""

__version__ = "1.0.0"
__author__ = "Sample Plugin Developer"
