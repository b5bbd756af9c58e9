# OAuth2 provider descriptors
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Literal

Mode = Literal["export", "import"]


def _freeze(scopes: Mapping[str, Iterable[str]]) -> Mapping[str, tuple[str, ...]]:
    return MappingProxyType({category: tuple(values) for category, values in scopes.items()})


@dataclass(frozen=True)
class OAuth2Config:
    """
    Authorization-code flow settings for one provider.

    Pure configuration: nothing here talks to the network. Scopes are grouped
    by data category (e.g. "PHOTOS"); an export-only provider has no import
    scopes.
    """

    service_name: str
    authorization_url: str
    token_url: str
    export_scopes: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    import_scopes: Mapping[str, tuple[str, ...]] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "export_scopes", _freeze(self.export_scopes))
        object.__setattr__(self, "import_scopes", _freeze(self.import_scopes))

    def scopes_for(self, mode: Mode, categories: Iterable[str]) -> list[str]:
        """Scopes needed to export or import the given categories, in declared order."""
        if mode == "export":
            source = self.export_scopes
        elif mode == "import":
            source = self.import_scopes
        else:
            raise ValueError(f"Unknown mode: {mode}")

        scopes: list[str] = []
        for category in categories:
            for scope in source.get(category, ()):
                if scope not in scopes:
                    scopes.append(scope)
        return scopes

    def client_config(self, client_id: str, client_secret: str, redirect_uri: str) -> dict:
        """Client config in the shape google-auth-oauthlib expects for a web app."""
        return {
            "web": {
                "client_id": client_id,
                "client_secret": client_secret,
                "auth_uri": self.authorization_url,
                "token_uri": self.token_url,
                "redirect_uris": [redirect_uri],
            }
        }


INSTAGRAM = OAuth2Config(
    service_name="Instagram",
    authorization_url="https://api.instagram.com/oauth/authorize",
    token_url="https://api.instagram.com/oauth/access_token",
    export_scopes={"PHOTOS": ["basic"]},
    import_scopes={},
)

_REGISTRY: dict[str, OAuth2Config] = {INSTAGRAM.service_name.lower(): INSTAGRAM}


def register_oauth_config(config: OAuth2Config) -> None:
    """Add a provider to the registry. Re-registering an identical record is a no-op."""
    key = config.service_name.lower()
    existing = _REGISTRY.get(key)
    if existing is not None and existing != config:
        raise ValueError(f"OAuth config already registered for {config.service_name}")
    _REGISTRY[key] = config


def get_oauth_config(service_name: str) -> OAuth2Config:
    """Look up a provider by name (case-insensitive)."""
    try:
        return _REGISTRY[service_name.lower()]
    except KeyError:
        raise KeyError(
            f"No OAuth config for {service_name!r}. Known: {', '.join(available_services())}"
        ) from None


def available_services() -> list[str]:
    return sorted(config.service_name for config in _REGISTRY.values())
