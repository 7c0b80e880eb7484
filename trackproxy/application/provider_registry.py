"""Tracking providers served by the generic ``/{provider}`` route."""

from typing import Dict, Optional

from ..domain.models import ProviderInfo

# slug -> display name and background colour class
PROVIDERS: Dict[str, ProviderInfo] = {
    "sky": ProviderInfo(name="Sky56", css_class="primary"),
    "correoses": ProviderInfo(name="Correos ES", css_class="yellow"),
    "expresso24": ProviderInfo(name="Expresso24", css_class="warning"),
    "singpost": ProviderInfo(name="Singpost", css_class="danger"),
    "ctt": ProviderInfo(name="CTT", css_class="primary"),
    "directlink": ProviderInfo(name="Direct Link", css_class="yellow"),
    "trackchinapost": ProviderInfo(name="Track China Post", css_class="danger"),
    "cainiao": ProviderInfo(name="Cainiao", css_class="danger"),
    "yanwen": ProviderInfo(name="Yanwen", css_class="success"),
    "cjah": ProviderInfo(name="Cjah Tracking", css_class="success"),
    "postNL": ProviderInfo(name="Post NL", css_class="warning"),
}

# Providers that also need the recipient's postal code, with their display names
POSTAL_CODE_PROVIDERS: Dict[str, str] = {
    "correos": "Correos Express Novo",
    "correosOld": "Correos Express Antigo",
    "adicional": "Adicional",
}


def get_provider(slug: str) -> Optional[ProviderInfo]:
    return PROVIDERS.get(slug)
