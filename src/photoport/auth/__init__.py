"""
OAuth2 provider descriptors.

Declares authorization/token endpoints and scopes per provider for use by a
generic OAuth2 client.
"""

from photoport.auth.flow import build_flow
from photoport.auth.oauth_config import (
    INSTAGRAM,
    OAuth2Config,
    available_services,
    get_oauth_config,
    register_oauth_config,
)

__all__ = [
    "OAuth2Config",
    "INSTAGRAM",
    "get_oauth_config",
    "register_oauth_config",
    "available_services",
    "build_flow",
]
