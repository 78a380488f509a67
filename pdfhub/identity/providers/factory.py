from pdfhub.config.settings import Settings
from pdfhub.identity.providers.base import BaseIdentityProvider
from pdfhub.identity.providers.example_adapter import ExampleIdentityProvider
from pdfhub.identity.providers.facebook_adapter import FacebookIdentityProvider
from pdfhub.identity.providers.google_adapter import GoogleIdentityProvider


class IdentityProviderFactory:
    """Creates the enabled identity providers, keyed by route name."""

    SUPPORTED = ("google", "facebook", "example")

    @classmethod
    def create_all(cls, settings: Settings) -> dict[str, BaseIdentityProvider]:
        return {name: cls.create(name, settings) for name in settings.identity_provider_names}

    @classmethod
    def create(cls, name: str, settings: Settings) -> BaseIdentityProvider:
        if name == "google":
            return GoogleIdentityProvider(
                client_id=settings.google_client_id,
                tokeninfo_url=settings.google_tokeninfo_url,
                timeout_seconds=settings.identity_provider_timeout_seconds,
            )
        if name == "facebook":
            return FacebookIdentityProvider(
                graph_url=settings.facebook_graph_url,
                timeout_seconds=settings.identity_provider_timeout_seconds,
            )
        if name == "example":
            return ExampleIdentityProvider()
        raise ValueError(
            f"Unknown identity provider '{name}'. Choose from: {list(cls.SUPPORTED)}"
        )
