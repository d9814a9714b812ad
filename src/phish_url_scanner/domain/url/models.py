"""URL domain-level models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class UrlComponents(BaseModel):
    model_config = ConfigDict(frozen=True)

    original_url: str
    normalized_url: str
    url_hash: str
    scheme: str
    hostname: str
    original_hostname: str = ""
    domain: str
    subdomain: str = ""
    tld: str = ""
    port: int | None = None
    path: str = "/"
    query: str = ""
    fragment: str = ""
    username: str = ""
    password: str = ""
    has_auth: bool = False
    is_ip: bool = False
    is_shortener: bool = False
    has_subdomain: bool = False
    url_length: int = 0

    @property
    def subdomain_labels(self) -> list[str]:
        return [label for label in self.subdomain.split(".") if label] if self.subdomain else []
