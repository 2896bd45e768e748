"""Bluesky handle to DID resolution."""

import dns.exception
import dns.resolver
import httpx

from elonara.adapter.error import IdentityResolutionError
from elonara.domain.value import BlueskyDID


async def resolve_handle_to_did(handle: str) -> BlueskyDID:
    """Resolve an AT Protocol handle to a DID.

    Tries the DNS TXT record at ``_atproto.{handle}`` first, then the
    HTTPS well-known endpoint.

    Args:
        handle: AT Protocol handle (e.g. "alice.bsky.social"), "@" optional

    Returns:
        BlueskyDID value object

    Raises:
        IdentityResolutionError: If neither method yields a valid DID
    """
    handle = handle.strip().lstrip("@").lower()
    if not handle or "." not in handle:
        raise IdentityResolutionError(f"Not a Bluesky handle: {handle!r}")

    did_str = _resolve_handle_via_dns(handle)
    if not did_str:
        try:
            did_str = await _resolve_handle_via_https(handle)
        except httpx.HTTPError as e:
            raise IdentityResolutionError(
                f"Failed to resolve handle {handle}: {e}"
            ) from e

    try:
        return BlueskyDID(did_str)
    except ValueError as e:
        raise IdentityResolutionError(
            f"Invalid DID format from {handle}: {e}"
        ) from e


def _resolve_handle_via_dns(handle: str) -> str | None:
    """Look up ``did=...`` in the TXT records of ``_atproto.{handle}``."""
    try:
        answers = dns.resolver.resolve(f"_atproto.{handle}", "TXT")
    except (dns.resolver.NXDOMAIN, dns.resolver.NoAnswer):
        return None
    except dns.exception.DNSException:
        return None

    for rdata in answers:
        txt_value = "".join(
            s.decode() if isinstance(s, bytes) else s for s in rdata.strings
        )
        if txt_value.startswith("did="):
            return txt_value[4:].strip()
    return None


async def _resolve_handle_via_https(handle: str) -> str:
    """Fetch ``https://{handle}/.well-known/atproto-did``."""
    url = f"https://{handle}/.well-known/atproto-did"
    async with httpx.AsyncClient(timeout=10.0) as client:
        response = await client.get(url)
        response.raise_for_status()
        return response.text.strip()
