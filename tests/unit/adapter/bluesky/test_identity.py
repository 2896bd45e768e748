"""Unit tests for Bluesky handle resolution."""

from unittest.mock import AsyncMock, MagicMock, patch

import dns.resolver
import httpx
import pytest

from elonara.adapter.bluesky.identity import (
    _resolve_handle_via_dns,
    resolve_handle_to_did,
)
from elonara.adapter.error import IdentityResolutionError
from elonara.domain.value import BlueskyDID

DNS_LOOKUP = "elonara.adapter.bluesky.identity._resolve_handle_via_dns"


def _https_response(text: str) -> MagicMock:
    response = MagicMock()
    response.text = text
    response.raise_for_status = MagicMock()
    return response


class TestResolveHandleToDID:
    @pytest.mark.asyncio
    async def test_prefers_dns_record(self):
        with (
            patch(DNS_LOOKUP, return_value="did:plc:fromdns"),
            patch("httpx.AsyncClient") as mock_client,
        ):
            result = await resolve_handle_to_did("alice.bsky.social")

        assert result == BlueskyDID("did:plc:fromdns")
        mock_client.assert_not_called()

    @pytest.mark.asyncio
    async def test_falls_back_to_well_known_endpoint(self):
        with (
            patch(DNS_LOOKUP, return_value=None),
            patch("httpx.AsyncClient") as mock_client,
        ):
            get = AsyncMock(return_value=_https_response("did:plc:abc123xyz\n"))
            mock_client.return_value.__aenter__.return_value.get = get

            result = await resolve_handle_to_did("@Alice.bsky.social ")

        assert str(result) == "did:plc:abc123xyz"
        get.assert_called_once_with("https://alice.bsky.social/.well-known/atproto-did")

    @pytest.mark.asyncio
    async def test_rejects_non_handles(self):
        with pytest.raises(IdentityResolutionError):
            await resolve_handle_to_did("alice")

    @pytest.mark.asyncio
    async def test_http_error_becomes_resolution_error(self):
        with (
            patch(DNS_LOOKUP, return_value=None),
            patch("httpx.AsyncClient") as mock_client,
        ):
            mock_client.return_value.__aenter__.return_value.get = AsyncMock(
                side_effect=httpx.ConnectError("no route")
            )

            with pytest.raises(IdentityResolutionError, match="alice.bsky.social"):
                await resolve_handle_to_did("alice.bsky.social")

    @pytest.mark.asyncio
    async def test_invalid_did_becomes_resolution_error(self):
        with (
            patch(DNS_LOOKUP, return_value=None),
            patch("httpx.AsyncClient") as mock_client,
        ):
            mock_client.return_value.__aenter__.return_value.get = AsyncMock(
                return_value=_https_response("<html>not found</html>")
            )

            with pytest.raises(IdentityResolutionError, match="Invalid DID"):
                await resolve_handle_to_did("alice.bsky.social")


class TestResolveHandleViaDNS:
    def test_reads_did_from_txt_record(self):
        record = MagicMock()
        record.strings = [b"did=did:plc:abc123"]

        with patch("dns.resolver.resolve", return_value=[record]) as resolve:
            assert _resolve_handle_via_dns("alice.example.com") == "did:plc:abc123"

        resolve.assert_called_once_with("_atproto.alice.example.com", "TXT")

    def test_missing_record_returns_none(self):
        with patch("dns.resolver.resolve", side_effect=dns.resolver.NXDOMAIN()):
            assert _resolve_handle_via_dns("alice.example.com") is None

    def test_ignores_unrelated_txt_records(self):
        record = MagicMock()
        record.strings = [b"v=spf1 -all"]

        with patch("dns.resolver.resolve", return_value=[record]):
            assert _resolve_handle_via_dns("alice.example.com") is None
