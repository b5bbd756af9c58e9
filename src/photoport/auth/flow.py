# hand-off to the generic OAuth2 client
from collections.abc import Iterable

from google_auth_oauthlib.flow import Flow

from photoport.auth.oauth_config import Mode, OAuth2Config


def build_flow(
    config: OAuth2Config,
    mode: Mode,
    categories: Iterable[str],
    client_id: str,
    client_secret: str,
    redirect_uri: str,
) -> Flow:
    """
    Build an authorization-code flow for a provider.

    Args:
        config: Provider descriptor
        mode: "export" or "import"
        categories: Data categories being transferred (e.g. ["PHOTOS"])
        client_id: OAuth client id registered with the provider
        client_secret: OAuth client secret
        redirect_uri: Callback URL registered with the provider

    Raises:
        ValueError: If the provider declares no scopes for the request
    """
    categories = list(categories)
    scopes = config.scopes_for(mode, categories)
    if not scopes:
        raise ValueError(
            f"{config.service_name} has no {mode} scopes for {', '.join(categories) or 'nothing'}"
        )
    return Flow.from_client_config(
        config.client_config(client_id, client_secret, redirect_uri),
        scopes=scopes,
        redirect_uri=redirect_uri,
    )
