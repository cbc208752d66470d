"""
SnackCheck scan core: ingredient extraction, tiered resolution, health scoring.
"""
__version__ = "1.0.0"
