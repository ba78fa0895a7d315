"""
ariakernel - headless ARIA focus management and command dispatch kernel
"""

__version__ = "0.3.0"
