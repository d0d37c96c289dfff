"""
Entry point for running neighbor_discovery as a module.

This allows the package to be executed with: python -m neighbor_discovery
"""

from .main import main

if __name__ == "__main__":
    exit(main())
