# hrmon/delivery/endpoint.py
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class EndpointConfig:
    """
    Remote collection endpoint. Readings are embedded in the URL path:
      {scheme}://{host}:{port}/{base_path}/{path_template}
    """
    host: str = "localhost"
    port: int = 8080
    base_path: str = "IoT-Application/rest/v1"
    scheme: str = "http"
    path_template: str = "saveHeartRate/{reading}"
    timeout_s: float = 5.0
    max_workers: int = 4

    @property
    def base_url(self) -> str:
        base = self.base_path.strip("/")
        root = f"{self.scheme}://{self.host}:{self.port}"
        return f"{root}/{base}" if base else root

    def url_for(self, reading: int) -> str:
        path = self.path_template.format(reading=reading).lstrip("/")
        return f"{self.base_url}/{path}"
