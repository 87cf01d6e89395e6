"""Address lookup endpoints."""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from orderdesk.services.address_lookup import AddressLookupClient, sanitize_postal_code

logger = logging.getLogger(__name__)

router = APIRouter()

CEP_LENGTH = 8
INVALID_CEP_MESSAGE = "CEP inválido. Formato esperado: 12345678 ou 12345-678"


def get_address_client(request: Request) -> AddressLookupClient:
    """Get the address client created at startup."""
    return request.app.state.address_client


def is_valid_cep(cep: str) -> bool:
    """CEP must have 8 digits, with or without the hyphen."""
    return len(sanitize_postal_code(cep)) == CEP_LENGTH


@router.get("/{cep}")
async def get_address(
    cep: str,
    client: AddressLookupClient = Depends(get_address_client),
):
    """
    Look up an address by CEP.

    Always answers 200 for a well-formed CEP; when the upstream is down or
    the code is unknown the body is the fallback payload.
    """
    if not is_valid_cep(cep):
        return JSONResponse(status_code=400, content={"error": INVALID_CEP_MESSAGE})

    result = await client.fetch_address(cep)
    if not result.succeeded:
        logger.info("Serving fallback address for CEP %s", cep)

    return result.to_dict()
