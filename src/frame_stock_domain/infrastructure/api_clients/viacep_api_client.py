"""Client for the ViaCEP postal-code API, used to fill buyer addresses."""

import json
import logging
import re

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from src.common.config.settings import settings
from src.common.dtos.stock_dtos import AddressDTO
from src.common.exceptions.custom_exceptions import APIError

logger = logging.getLogger(__name__)


class ViaCepApiClient:
    def __init__(self) -> None:
        self.base_url = settings.VIACEP_API_BASE_URL.rstrip("/")

        self.session = requests.Session()
        retry_strategy = Retry(
            total=3,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["HEAD", "GET", "OPTIONS"],
            backoff_factor=1,
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

    @staticmethod
    def clean_cep(cep: str) -> str:
        return re.sub(r"\D", "", cep or "")

    def fetch_address(self, cep: str) -> AddressDTO:
        """Looks up street, neighborhood, city and state for a Brazilian CEP."""
        clean_cep = self.clean_cep(cep)
        if len(clean_cep) != 8:
            raise APIError(f"Invalid CEP: {cep!r}")

        url = f"{self.base_url}/{clean_cep}/json/"
        try:
            response = self.session.get(url, timeout=10)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.Timeout as e:
            raise APIError(f"CEP lookup for {clean_cep} timed out", original_exception=e)
        except requests.exceptions.RequestException as e:
            status_code = e.response.status_code if e.response is not None else None
            raise APIError(f"CEP lookup for {clean_cep} failed", original_exception=e, status_code=status_code)
        except json.JSONDecodeError as e:
            raise APIError(f"Failed to decode CEP lookup response for {clean_cep}", original_exception=e)

        if not isinstance(data, dict) or data.get("erro"):
            raise APIError(f"CEP not found: {clean_cep}")

        logger.debug(f"CEP {clean_cep} resolved to {data.get('localidade')}/{data.get('uf')}")
        return AddressDTO(
            cep=clean_cep,
            street=data.get("logradouro") or None,
            neighborhood=data.get("bairro") or None,
            city=data.get("localidade") or None,
            state=data.get("uf") or None,
        )
