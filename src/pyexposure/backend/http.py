"""HTTP backend client for the retrieval and submission servers."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable, Sequence
from datetime import datetime
from pathlib import Path
from typing import Any

import aiohttp
from pydantic import ValidationError

from pyexposure._constants import USER_AGENT
from pyexposure._crypto import generate_key_pair, retrieve_signature, seal
from pyexposure._dates import hours_since_epoch, to_epoch_ms, utcnow
from pyexposure._redact import redact_for_log
from pyexposure.config import ExposureConfig
from pyexposure.exceptions import (
    ExposureApiError,
    ExposureAuthenticationError,
    ExposureError,
    ExposureTransportError,
)
from pyexposure.models.exposure import ExposureConfiguration, TemporaryExposureKey
from pyexposure.models.submission import SubmissionKeySet

_logger = logging.getLogger(__name__)

_AUTH_REJECTED_STATUSES = frozenset({401, 403})


def _decode_json(endpoint: str, status: int, body: bytes) -> Any:
    if not 200 <= status < 300:
        raise ExposureTransportError(
            f"HTTP {status} from {endpoint}: {body[:200]!r}",
            status_code=status,
            endpoint=endpoint,
        )
    try:
        return json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ExposureTransportError(
            f"Invalid JSON from {endpoint}: {body[:200]!r}",
            status_code=status,
            endpoint=endpoint,
        ) from exc


class BackendService:
    """Async client for the diagnosis-key backend.

    Usage::

        async with BackendService(config) as backend:
            configuration = await backend.get_exposure_configuration()
    """

    def __init__(
        self,
        config: ExposureConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._clock = clock

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> BackendService:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession(headers={"user-agent": USER_AGENT})
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_session(self) -> aiohttp.ClientSession:
        if self._http_session is None:
            raise ExposureError("Backend not initialized. Use 'async with BackendService(...) as backend:'")
        return self._http_session

    async def _request(
        self,
        method: str,
        url: str,
        *,
        endpoint: str,
        json_body: dict[str, Any] | None = None,
    ) -> tuple[int, bytes]:
        http = self._require_session()
        timeout = aiohttp.ClientTimeout(total=self._config.request_timeout)
        _logger.debug("%s %s", method, endpoint)
        try:
            async with http.request(method, url, json=json_body, timeout=timeout) as resp:
                body = await resp.read()
                return resp.status, body
        except aiohttp.ClientError as exc:
            raise ExposureTransportError(f"Request to {endpoint} failed: {exc}", endpoint=endpoint) from exc
        except TimeoutError as exc:
            raise ExposureTransportError(f"Request to {endpoint} timed out", endpoint=endpoint) from exc

    # ------------------------------------------------------------------
    # Retrieval server
    # ------------------------------------------------------------------

    async def get_exposure_configuration(self) -> ExposureConfiguration:
        region = self._config.region
        endpoint = f"/exposure-configuration/{region}.json"
        status, body = await self._request("GET", f"{self._config.retrieve_url}{endpoint}", endpoint=endpoint)
        data = _decode_json(endpoint, status, body)
        try:
            return ExposureConfiguration.model_validate(data)
        except ValidationError as exc:
            raise ExposureApiError(f"Invalid exposure configuration from {endpoint}", endpoint=endpoint) from exc

    async def retrieve_diagnosis_keys(self, period: int) -> str:
        """Download the key archive for *period* into the cache directory."""
        region = self._config.region
        signature = retrieve_signature(self._config.hmac_key, region, period, hours_since_epoch(self._clock()))
        # The signature is kept out of the endpoint label used in logs and errors.
        endpoint = f"/retrieve/{region}/{period}"
        url = f"{self._config.retrieve_url}{endpoint}/{signature}"
        status, body = await self._request("GET", url, endpoint=endpoint)
        if status != 200:
            raise ExposureTransportError(
                f"HTTP {status} from {endpoint}",
                status_code=status,
                endpoint=endpoint,
            )
        path = Path(self._config.cache_dir) / f"{period}.zip"
        await asyncio.to_thread(_write_file, path, body)
        _logger.debug("Stored %d byte archive for period %d at %s", len(body), period, path)
        return str(path)

    # ------------------------------------------------------------------
    # Submission server
    # ------------------------------------------------------------------

    async def claim_one_time_code(self, one_time_code: str) -> SubmissionKeySet:
        """Exchange a one-time code for a submission key pair.

        Raises
        ------
        ExposureAuthenticationError
            If the server rejects the code.
        """
        endpoint = "/claim-key"
        private_key, public_key = generate_key_pair()
        request = {"oneTimeCode": one_time_code, "appPublicKey": public_key}
        _logger.debug("POST %s %s", endpoint, redact_for_log(request))
        status, body = await self._request(
            "POST",
            f"{self._config.submit_url}{endpoint}",
            endpoint=endpoint,
            json_body=request,
        )
        if status in _AUTH_REJECTED_STATUSES:
            raise ExposureAuthenticationError(
                f"One-time code rejected (HTTP {status})",
                code=str(status),
                endpoint=endpoint,
            )
        data = _decode_json(endpoint, status, body)
        if not isinstance(data, dict):
            raise ExposureApiError(f"Unexpected response shape from {endpoint}", endpoint=endpoint)
        _logger.debug("%s response: %s", endpoint, redact_for_log(data))

        error = data.get("error")
        if error:
            raise ExposureAuthenticationError(
                f"One-time code rejected: {error}",
                code=str(error),
                endpoint=endpoint,
            )
        server_public_key = data.get("serverPublicKey")
        if not isinstance(server_public_key, str) or not server_public_key:
            raise ExposureApiError(f"Missing serverPublicKey from {endpoint}", endpoint=endpoint)

        key_set = SubmissionKeySet(
            server_public_key=server_public_key,
            client_private_key=private_key,
            client_public_key=public_key,
        )
        _logger.debug("Claimed submission key set %s", redact_for_log(key_set))
        return key_set

    async def report_diagnosis_keys(
        self,
        key_set: SubmissionKeySet,
        keys: Sequence[TemporaryExposureKey],
    ) -> None:
        """Upload this device's keys, sealed for the submission server."""
        endpoint = "/upload"
        plaintext = json.dumps(
            {
                "keys": [key.to_wire() for key in keys],
                "timestamp": to_epoch_ms(self._clock()),
            },
            separators=(",", ":"),
        ).encode("utf-8")
        nonce, payload = seal(
            plaintext,
            private_key=key_set.client_private_key,
            peer_public_key=key_set.server_public_key,
        )
        request = {
            "serverPublicKey": key_set.server_public_key,
            "appPublicKey": key_set.client_public_key,
            "nonce": nonce,
            "payload": payload,
        }
        _logger.debug("POST %s %s (%d keys)", endpoint, redact_for_log(request), len(keys))
        status, body = await self._request(
            "POST",
            f"{self._config.submit_url}{endpoint}",
            endpoint=endpoint,
            json_body=request,
        )
        if not body.strip():
            if not 200 <= status < 300:
                raise ExposureTransportError(f"HTTP {status} from {endpoint}", status_code=status, endpoint=endpoint)
            return
        data = _decode_json(endpoint, status, body)
        error = data.get("error") if isinstance(data, dict) else None
        if error:
            raise ExposureApiError(f"Key upload rejected: {error}", code=str(error), endpoint=endpoint)


def _write_file(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
