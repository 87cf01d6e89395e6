"""Address lookup by CEP (Brazilian postal code) via ViaCEP."""

import re
from typing import Any, Dict, Optional

import httpx

from orderdesk.resilience import FetchResult, ResilienceConfig, ResilientFetcher
from orderdesk.resilience.fetcher import SleepFunc

DEFAULT_BASE_URL = "https://viacep.com.br/ws"
UNAVAILABLE_MESSAGE = "Serviço temporariamente indisponível"

_NON_DIGITS = re.compile(r"[^0-9]")


def sanitize_postal_code(raw_code: Any) -> str:
    """Strip every character that is not a decimal digit."""
    return _NON_DIGITS.sub("", str(raw_code))


class AddressLookupClient:
    """
    ViaCEP client that always returns an address-shaped payload.

    Found addresses are passed through verbatim. Unknown codes, error
    statuses, malformed bodies and unreachable upstreams all produce the
    same fallback payload with ``succeeded=False``.
    """

    def __init__(
        self,
        config: Optional[ResilienceConfig] = None,
        base_url: str = DEFAULT_BASE_URL,
        client: Optional[httpx.AsyncClient] = None,
        sleep: Optional[SleepFunc] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.fetcher = ResilientFetcher(
            handler=self,
            config=config,
            client=client,
            sleep=sleep,
        )

    def build_url(self, digits: str) -> str:
        """Build the ViaCEP JSON endpoint for a sanitized code."""
        return f"{self.base_url}/{digits}/json/"

    async def fetch_address(self, raw_code: str) -> FetchResult:
        """
        Look up the address for a postal code.

        Args:
            raw_code: Postal code, formatted or not (e.g. "01310-100")

        Returns:
            FetchResult with the address fields or the fallback payload
        """
        digits = sanitize_postal_code(raw_code)
        return await self.fetcher.fetch_with_resilience(self.build_url(digits))

    def fallback_response(self) -> Dict[str, Any]:
        return {
            "cep": None,
            "logradouro": UNAVAILABLE_MESSAGE,
            "complemento": "",
            "bairro": "",
            "localidade": "",
            "uf": "",
            "fallback": True,
        }

    def parse_response(self, response: httpx.Response) -> FetchResult:
        """Interpret a ViaCEP response."""
        if not response.is_success:
            return FetchResult(succeeded=False, data=self.fallback_response())

        try:
            data = response.json()
        except ValueError:
            return FetchResult(succeeded=False, data=self.fallback_response())

        if not isinstance(data, dict):
            return FetchResult(succeeded=False, data=self.fallback_response())

        # ViaCEP answers 200 with {"erro": true} for unknown codes
        if data.get("erro"):
            return FetchResult(succeeded=False, data=self.fallback_response())

        return FetchResult(succeeded=True, data=data)

    async def aclose(self):
        await self.fetcher.aclose()

    async def __aenter__(self) -> "AddressLookupClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
