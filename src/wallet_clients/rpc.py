"""JSON-RPC wallet session for wallet_sendCalls / wallet_getCallsStatus"""

import itertools
import logging
from typing import Any, Dict, List, Optional
import aiohttp
from pydantic import ValidationError

try:
    from wallet_connector_base import WalletConnectionError, BatchSubmissionError
    from app_config import AppConfig, get_config
    from .models import CallsStatus
except ImportError as e:
    raise ImportError(
        f"Failed to import required packages: {e}. "
        "Ensure wallet-connector-base and app-config packages are installed."
    )


class WalletRpcSession:
    """Talks to a wallet RPC endpoint on behalf of one connected account"""

    def __init__(self, address: str, config: Optional[AppConfig] = None,
                 logger: Optional[logging.Logger] = None):
        self.config = config or get_config()
        self.logger = logger or logging.getLogger(__name__)
        self.address = address
        self.rpc_url = self.config.wallet.rpc_url
        self._ids = itertools.count(1)

    async def _call(self, method: str, params: List[Any]) -> Any:
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        self.logger.debug(f"RPC {method} -> {self.rpc_url}")

        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(
                    self.rpc_url,
                    json=payload,
                    timeout=aiohttp.ClientTimeout(total=self.config.wallet.request_timeout_seconds)
                ) as response:

                    if response.status != 200:
                        response_text = await response.text()
                        raise WalletConnectionError(
                            f"Wallet RPC returned status {response.status}: {response_text}"
                        )

                    body = await response.json()

        except aiohttp.ClientError as e:
            raise WalletConnectionError(f"Wallet RPC {method} failed: {e}") from e

        if not isinstance(body, dict):
            raise WalletConnectionError(f"Wallet RPC {method} returned a non-object response: {body!r}")

        if body.get("error"):
            error = body["error"]
            message = error.get("message", error) if isinstance(error, dict) else error
            raise BatchSubmissionError(f"{method} rejected: {message}")
        return body.get("result")

    async def send_calls(self, request: Dict[str, Any]) -> Any:
        """Submit {"calls": [{to, data, value}]} as one atomic batch; returns the calls id"""
        params = {
            "version": self.config.wallet.calls_version,
            "chainId": hex(self.config.oneinch.chain_id),
            "from": self.address,
            "atomicRequired": self.config.wallet.atomic_required,
            "calls": [
                {"to": call["to"], "data": call["data"], "value": hex(int(call.get("value") or 0))}
                for call in request["calls"]
            ],
        }
        return await self._call("wallet_sendCalls", [params])

    async def get_calls_status(self, calls_id: str) -> CallsStatus:
        result = await self._call("wallet_getCallsStatus", [calls_id])
        if isinstance(result, dict):
            result = {"id": calls_id, **result}
        try:
            return CallsStatus.model_validate(result)
        except ValidationError as e:
            raise WalletConnectionError(f"Unexpected wallet_getCallsStatus response: {e}") from e
