"""
Configuration module for Neighbor Discovery.
Provides loading and validation of the sweep, neighbor and resolution settings.
"""

from .config_loader import (
    ConfigLoader, DiscoveryConfig, SweepConfig, NeighborConfig, ResolutionConfig
)

__all__ = ['ConfigLoader', 'DiscoveryConfig', 'SweepConfig', 'NeighborConfig', 'ResolutionConfig']
