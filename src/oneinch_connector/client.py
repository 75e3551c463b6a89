"""1inch API client for portfolio snapshots, approvals and swap transactions"""

import os
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union
import aiohttp
from pydantic import ValidationError

try:
    import wallet_connector_base
    from wallet_connector_base import (
        PortfolioToken,
        Transaction,
        SwapAPIError,
    )
    from app_config import AppConfig, get_config
    from .models import PortfolioSnapshotEntry, TokenMetadata, TxPayload, SwapQuote
except ImportError as e:
    raise ImportError(
        f"Failed to import required packages: {e}. "
        "Ensure wallet-connector-base and app-config packages are installed."
    )

QueryParams = Union[Dict[str, Any], Sequence[Tuple[str, Any]]]


def _query_value(value: Any) -> str:
    # aiohttp rejects bool query values
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class OneInchClient:
    """Client for the portfolio, approval and swap routing endpoints"""

    def __init__(self, config: Optional[AppConfig] = None, api_key: Optional[str] = None,
                 logger: Optional[logging.Logger] = None):
        self.config = config or get_config()
        self.logger = logger or logging.getLogger(__name__)
        self.base_url = self.config.oneinch.base_url
        self.chain_id = self.config.oneinch.chain_id
        self.api_key = api_key or os.getenv('ONEINCH_API_KEY')
        self.native_token_address = self.config.rebalance.native_token_address

        self.logger.debug(
            f"Initializing OneInchClient for chain {self.chain_id} "
            f"with wallet-connector-base v{wallet_connector_base.__version__}"
        )

    @property
    def _swap_path(self) -> str:
        return f"/swap/{self.config.oneinch.swap_api_version}/{self.chain_id}"

    async def _get(self, path: str, params: QueryParams) -> Any:
        """GET a JSON document from the API"""
        url = f"{self.base_url}{path}"
        items = params.items() if isinstance(params, dict) else params
        query = [(key, _query_value(value)) for key, value in items]

        headers = {'Accept': 'application/json'}
        if self.api_key:
            headers['Authorization'] = f"Bearer {self.api_key}"

        self.logger.debug(f"GET {url}")

        try:
            async with aiohttp.ClientSession() as session:
                async with session.get(
                    url,
                    params=query,
                    headers=headers,
                    timeout=aiohttp.ClientTimeout(total=self.config.oneinch.request_timeout_seconds)
                ) as response:

                    if response.status != 200:
                        response_text = await response.text()
                        raise SwapAPIError(
                            f"API returned status {response.status}: {response_text}",
                            status=response.status,
                            body=response_text
                        )

                    return await response.json()

        except aiohttp.ClientError as e:
            self.logger.error(f"HTTP error calling {path}: {e}")
            raise SwapAPIError(f"HTTP error calling {path}: {e}") from e

    async def get_approval_transaction(self, token_address: str, amount: str) -> Optional[Transaction]:
        """Approval for the router to spend `amount` of the token; None for the native asset"""
        if token_address.lower() == self.native_token_address:
            return None

        self.logger.debug(f"Getting approval transaction for {token_address}, amount: {amount}")

        try:
            data = await self._get(
                f"{self._swap_path}/approve/transaction",
                {'tokenAddress': token_address, 'amount': amount}
            )
            payload = TxPayload.model_validate(data)
        except ValidationError as e:
            raise SwapAPIError(f"Malformed approval response for {token_address}: {e}") from e
        except Exception as e:
            self.logger.error(f"Error getting approval transaction: {e}")
            raise

        return Transaction(
            to=payload.to,
            data=payload.data,
            value=payload.value,
            type='approval',
            description=f"Approve {token_address} spending"
        )

    async def get_swap_transaction(self, from_token: str, to_token: str, amount: str,
                                   wallet_address: str) -> Transaction:
        """Routed swap call for selling `amount` of from_token into to_token"""
        self.logger.debug(f"Getting swap transaction: {from_token} -> {to_token}, amount: {amount}")

        params = {
            'src': from_token,
            'dst': to_token,
            'amount': amount,
            'from': wallet_address,
            'origin': wallet_address,
            'slippage': self.config.swap.slippage_percent,
            'disableEstimate': self.config.swap.disable_estimate,
            'allowPartialFill': self.config.swap.allow_partial_fill,
            'includeTokensInfo': False,
            'includeProtocols': False,
            'includeGasInfo': False,
        }

        try:
            data = await self._get(f"{self._swap_path}/swap", params)
            quote = SwapQuote.model_validate(data)
        except ValidationError as e:
            raise SwapAPIError(f"Malformed swap response for {from_token} -> {to_token}: {e}") from e
        except Exception as e:
            self.logger.error(f"Error getting swap transaction: {e}")
            raise

        return Transaction(
            to=quote.tx.to,
            data=quote.tx.data,
            value=quote.tx.value,
            type='swap',
            description=f"Swap {from_token} to {to_token}",
            to_amount=quote.expected_output,
            protocols=quote.protocols
        )

    async def get_portfolio_tokens(self, wallet_address: str) -> List[PortfolioSnapshotEntry]:
        """Raw token snapshot for a wallet"""
        data = await self._get(
            f"/portfolio/portfolio/{self.config.oneinch.portfolio_api_version}/tokens/snapshot",
            [('addresses', wallet_address), ('chain_id', self.chain_id)]
        )

        if not isinstance(data, dict) or not isinstance(data.get('result'), list):
            raise SwapAPIError("Portfolio response must be a JSON object with a 'result' list")

        try:
            return [PortfolioSnapshotEntry.model_validate(item) for item in data['result']]
        except ValidationError as e:
            raise SwapAPIError(f"Malformed portfolio snapshot for {wallet_address}: {e}") from e

    async def get_token_metadata(self, contract_addresses: List[str]) -> Dict[str, TokenMetadata]:
        """Token metadata (logos) keyed by lower-case address"""
        if not contract_addresses:
            return {}

        data = await self._get(
            f"/token/{self.config.oneinch.token_api_version}/{self.chain_id}/custom",
            [('addresses', address) for address in contract_addresses]
        )

        if not isinstance(data, dict):
            raise SwapAPIError("Token metadata response must be a JSON object")

        try:
            return {
                address.lower(): TokenMetadata.model_validate(meta)
                for address, meta in data.items()
                if isinstance(meta, dict)
            }
        except ValidationError as e:
            raise SwapAPIError(f"Malformed token metadata response: {e}") from e

    async def fetch_processed_portfolio(self, wallet_address: str) -> List[PortfolioToken]:
        """Portfolio tokens with non-zero USD value, logos attached"""
        self.logger.info(f"Fetching portfolio for address {wallet_address}")

        entries = await self.get_portfolio_tokens(wallet_address)
        priced_entries = [e for e in entries if e.underlying_tokens]

        for entry in entries:
            if not entry.underlying_tokens:
                self.logger.debug(f"Skipping {entry.contract_name} - no underlying tokens")

        metadata = await self.get_token_metadata([e.contract_address for e in priced_entries])

        tokens = []
        for entry in priced_entries:
            underlying = entry.underlying_tokens[0]
            meta = metadata.get(entry.contract_address.lower())

            if underlying.value_usd <= 0:
                continue

            tokens.append(PortfolioToken(
                name=entry.contract_name,
                address=entry.contract_address,
                symbol=entry.contract_symbol,
                decimals=underlying.decimals,
                value_usd=underlying.value_usd,
                amount=underlying.amount,
                logo_uri=meta.logo_uri if meta else None
            ))

        total_value = sum(t.value_usd for t in tokens)
        self.logger.info(
            f"Portfolio processing complete: {len(tokens)} of {len(entries)} tokens, "
            f"total value ${total_value:,.2f}",
            extra={'event': 'portfolio_fetched', 'token_count': len(tokens)}
        )
        return tokens
