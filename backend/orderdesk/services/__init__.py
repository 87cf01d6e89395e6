"""Service layer modules."""

from orderdesk.services.address_lookup import (
    AddressLookupClient,
    sanitize_postal_code,
)

__all__ = ["AddressLookupClient", "sanitize_postal_code"]
