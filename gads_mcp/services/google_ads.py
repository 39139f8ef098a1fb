"""Thin async gateway over the official ``google-ads`` client.

The ``GoogleAdsClient`` is created lazily on first use and then reused for
the lifetime of the gateway.  Both remote calls run on a worker thread
because the client library is blocking.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from google.ads.googleads.client import GoogleAdsClient
from google.ads.googleads.errors import GoogleAdsException

from gads_mcp.config import Settings
from gads_mcp.errors import GoogleAdsApiError

logger = logging.getLogger("google_ads.gateway")


def _coerce_micros(value: Any, key: str = "") -> Any:
    """Turn int64 ``*_micros`` fields (rendered as strings by proto JSON) back into ints."""
    if isinstance(value, dict):
        return {k: _coerce_micros(v, k) for k, v in value.items()}
    if isinstance(value, list):
        return [_coerce_micros(v) for v in value]
    if key.endswith("_micros") and isinstance(value, str) and value.lstrip("-").isdigit():
        return int(value)
    return value


def _error_code_name(error: Any) -> str | None:
    kind = error.error_code._pb.WhichOneof("error_code")
    if kind is None:
        return None
    value = getattr(error.error_code, kind)
    return f"{kind}.{getattr(value, 'name', value)}"


def _operation_index(error: Any) -> int:
    elements = error.location.field_path_elements if error.location else []
    for element in elements:
        if element.field_name == "mutate_operations":
            return element.index
    return -1


def _api_error(exc: GoogleAdsException) -> GoogleAdsApiError:
    errors = []
    for err in exc.failure.errors if exc.failure else []:
        code = _error_code_name(err)
        errors.append(
            {
                "message": f"{err.message} ({code})" if code else err.message,
                "error_code": code,
            }
        )
    status = exc.error.code().name if exc.error is not None else None
    return GoogleAdsApiError(errors=errors, code=status, request_id=exc.request_id)


class GoogleAdsGateway:
    """Search and mutate against Google Ads using configured OAuth credentials."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._client: GoogleAdsClient | None = None

    @property
    def client(self) -> GoogleAdsClient:
        if self._client is None:
            missing = self._settings.missing_credentials()
            if missing:
                raise RuntimeError(
                    f"Missing required environment variables: {', '.join(missing)}"
                )
            config: dict[str, Any] = {
                "developer_token": self._settings.google_ads_developer_token,
                "client_id": self._settings.google_ads_client_id,
                "client_secret": self._settings.google_ads_client_secret,
                "refresh_token": self._settings.google_ads_refresh_token,
                "use_proto_plus": True,
            }
            if self._settings.google_ads_login_customer_id:
                config["login_customer_id"] = self._settings.google_ads_login_customer_id
            self._client = GoogleAdsClient.load_from_dict(config)
            logger.info(
                "Google Ads client initialised (login_customer_id=%r)",
                config.get("login_customer_id"),
            )
        return self._client

    # -- reads ------------------------------------------------------------

    def _search(self, customer_id: str, query: str) -> list[dict[str, Any]]:
        service = self.client.get_service("GoogleAdsService")
        rows: list[dict[str, Any]] = []
        try:
            stream = service.search_stream(customer_id=customer_id, query=query)
            for batch in stream:
                for row in batch.results:
                    rows.append(
                        _coerce_micros(
                            type(row).to_dict(
                                row,
                                use_integers_for_enums=False,
                                preserving_proto_field_name=True,
                            )
                        )
                    )
        except GoogleAdsException as exc:
            raise _api_error(exc) from exc
        return rows

    async def search(self, customer_id: str, query: str) -> list[dict[str, Any]]:
        """Run a GAQL query and return each result row as a nested dict."""
        return await asyncio.to_thread(self._search, customer_id, query)

    # -- writes -----------------------------------------------------------

    def _partial_failures(self, response: Any) -> list[dict[str, Any]]:
        status = response.partial_failure_error
        if not status or not status.code:
            return []
        failure_type = type(self.client.get_type("GoogleAdsFailure"))
        failures: list[dict[str, Any]] = []
        for detail in status.details:
            failure = failure_type.deserialize(detail.value)
            for err in failure.errors:
                failures.append(
                    {
                        "index": _operation_index(err),
                        "message": err.message,
                        "error_code": _error_code_name(err),
                    }
                )
        return failures

    @staticmethod
    def _resource_name(op_response: Any) -> str | None:
        kind = op_response._pb.WhichOneof("response")
        if kind is None:
            return None
        return getattr(op_response, kind).resource_name or None

    def _mutate(
        self,
        customer_id: str,
        operations: list[dict[str, Any]],
        partial_failure: bool,
        validate_only: bool,
    ) -> dict[str, Any]:
        service = self.client.get_service("GoogleAdsService")
        try:
            response = service.mutate(
                request={
                    "customer_id": customer_id,
                    "mutate_operations": operations,
                    "partial_failure": partial_failure,
                    "validate_only": validate_only,
                }
            )
        except GoogleAdsException as exc:
            raise _api_error(exc) from exc
        return {
            "results": [self._resource_name(r) for r in response.mutate_operation_responses],
            "partial_failures": self._partial_failures(response),
        }

    async def mutate(
        self,
        customer_id: str,
        operations: list[dict[str, Any]],
        *,
        partial_failure: bool = True,
        validate_only: bool = True,
    ) -> dict[str, Any]:
        """Send all *operations* in one GoogleAdsService.Mutate call.

        Returns ``{"results": [resource_name | None, ...],
        "partial_failures": [{"index", "message", "error_code"}, ...]}``.
        """
        return await asyncio.to_thread(
            self._mutate, customer_id, operations, partial_failure, validate_only
        )
