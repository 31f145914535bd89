"""
NIP13 - REST Ledger Reader

Ledger reader backed by a node's REST gateway, with connection pooling,
retries and error mapping. Blocking HTTP calls run on the default
executor so commands can synchronize concurrently.
"""

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from contracts.ledger import LedgerReader
from ledger.ids import id_to_hex
from ledger.network import Address
from models.metadata import AccountMetadata, TokenMetadata, scoped_key_hex
from models.token import MultisigInfo, TokenInfo


METADATA_TYPE_ACCOUNT = 0
METADATA_TYPE_MOSAIC = 1


class RestError(Exception):
    """Base exception for REST gateway errors."""

    def __init__(self, status: int, message: str):
        self.status = status
        self.message = message
        super().__init__(f"REST Error {status}: {message}")


class RestConnectionError(RestError):
    """Exception for REST connection failures."""
    pass


class RestTimeoutError(RestError):
    """Exception for REST timeout errors."""
    pass


@dataclass
class RestConfig:
    """Configuration for a REST gateway connection."""
    node_url: str = "http://localhost:3000"
    timeout: int = 30
    max_retries: int = 3
    backoff_factor: float = 0.5
    ssl_verify: bool = True

    def __post_init__(self):
        if not self.node_url:
            raise ValueError("node_url must be provided")
        self.node_url = self.node_url.rstrip('/')

    @classmethod
    def from_env(cls) -> 'RestConfig':
        """Create REST config from environment variables."""
        return cls(
            node_url=os.getenv("NIP13_NODE_URL", "http://localhost:3000"),
            timeout=int(os.getenv("NIP13_REST_TIMEOUT", "30")),
            max_retries=int(os.getenv("NIP13_REST_MAX_RETRIES", "3")),
            ssl_verify=os.getenv("NIP13_REST_SSL_VERIFY", "true").lower() == "true",
        )


class RestLedgerReader(LedgerReader):
    """Ledger reader querying a REST gateway."""

    def __init__(self, config: RestConfig, session: Optional[requests.Session] = None):
        """
        Initialize reader.

        Args:
            config: REST gateway configuration
            session: Optional pre-built session, mostly for tests
        """
        self.config = config
        self.logger = logging.getLogger(__name__)
        self.session = session or self._create_session()

    def _create_session(self) -> requests.Session:
        session = requests.Session()

        retry_strategy = Retry(
            total=self.config.max_retries,
            backoff_factor=self.config.backoff_factor,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET"]
        )

        adapter = HTTPAdapter(max_retries=retry_strategy, pool_maxsize=10)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        session.headers.update({
            "Accept": "application/json",
            "User-Agent": "nip13-rest-client/1.0"
        })
        return session

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        """
        Perform a GET request.

        Returns:
            Decoded JSON body, or None when the resource does not exist

        Raises:
            RestError: On transport failures and unexpected statuses
        """
        url = f"{self.config.node_url}{path}"
        self.logger.debug(f"GET {url} {params or ''}")

        try:
            response = self.session.get(
                url,
                params=params,
                timeout=self.config.timeout,
                verify=self.config.ssl_verify
            )
        except requests.exceptions.Timeout:
            raise RestTimeoutError(-1, f"Request timed out after {self.config.timeout}s")
        except requests.exceptions.ConnectionError as e:
            raise RestConnectionError(-1, f"Connection error: {e}")
        except requests.exceptions.RequestException as e:
            raise RestError(-1, f"Request failed: {e}")

        if response.status_code == 404:
            return None

        if response.status_code != 200:
            raise RestError(response.status_code, f"HTTP {response.status_code}: {response.reason}")

        try:
            return response.json()
        except ValueError as e:
            raise RestError(response.status_code, f"Invalid JSON response: {e}")

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, lambda: self.get(path, params))

    async def get_multisig_info(self, address: Address) -> Optional[MultisigInfo]:
        body = await self._get(f"/account/{address.plain}/multisig")
        if body is None:
            return None

        multisig = body['multisig']
        return MultisigInfo(
            account_address=multisig['accountAddress'],
            min_approval=int(multisig.get('minApproval', 0)),
            min_removal=int(multisig.get('minRemoval', 0)),
            cosignatory_addresses=list(multisig.get('cosignatoryAddresses', [])),
        )

    async def get_token_info(self, token_id: int) -> Optional[TokenInfo]:
        body = await self._get(f"/mosaics/{id_to_hex(token_id)}")
        if body is None:
            return None

        mosaic = body['mosaic']
        return TokenInfo(
            token_id=mosaic['id'],
            supply=int(mosaic.get('supply', 0)),
            owner_address=mosaic['ownerAddress'],
            divisibility=int(mosaic.get('divisibility', 0)),
            flags=int(mosaic.get('flags', 0)),
        )

    async def _get_metadata_value(self, params: Dict[str, Any]) -> Optional[str]:
        body = await self._get("/metadata", params)
        if not body or not body.get('data'):
            return None

        entry = body['data'][0]['metadataEntry']
        return bytes.fromhex(entry['value']).decode('utf-8')

    async def get_token_metadata(self, target: Address, token_id: int, key: str) -> Optional[TokenMetadata]:
        value = await self._get_metadata_value({
            'targetAddress': target.plain,
            'scopedMetadataKey': scoped_key_hex(key),
            'targetId': id_to_hex(token_id),
            'metadataType': METADATA_TYPE_MOSAIC,
        })
        if value is None:
            return None

        return TokenMetadata(key=key, value=value, target_address=target.plain, token_id=id_to_hex(token_id))

    async def get_account_metadata(self, target: Address, key: str) -> Optional[AccountMetadata]:
        value = await self._get_metadata_value({
            'targetAddress': target.plain,
            'scopedMetadataKey': scoped_key_hex(key),
            'metadataType': METADATA_TYPE_ACCOUNT,
        })
        if value is None:
            return None

        return AccountMetadata(key=key, value=value, target_address=target.plain)

    def close(self):
        """Close the underlying session."""
        if self.session:
            self.session.close()
