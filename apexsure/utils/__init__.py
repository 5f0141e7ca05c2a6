"""
Utility modules for the policy portal
"""
from .config_loader import PortalConfig, build_workflow, load_portal_config

__all__ = [
    'PortalConfig',
    'build_workflow',
    'load_portal_config',
]
