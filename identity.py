from typing import Optional, Sequence

from loguru import logger

from chain_providers import NameService
from errors import UnresolvableIdentity
from models import AccountIdentity
from utils import first_available, normalize_address


async def resolve_identity(
    raw_input: str, name_services: Sequence[NameService]
) -> AccountIdentity:
    """Turn user input (hex address, bare hex, or ENS name) into an AccountIdentity.

    Name lookups are best-effort; only failing to obtain an address raises
    UnresolvableIdentity.
    """
    text = (raw_input or "").strip()
    if not text:
        raise UnresolvableIdentity(raw_input)

    address = normalize_address(text)
    if address:
        display_name = await first_available(
            [_reverse(ns, address) for ns in name_services],
            what=f"reverse lookup of {address}",
        )
        return AccountIdentity(address=address, display_name=display_name)

    address = await first_available(
        [_forward(ns, text) for ns in name_services],
        what=f"resolution of {text!r}",
    )
    if not address:
        logger.info("Could not resolve {!r} to an address", text)
        raise UnresolvableIdentity(raw_input)

    return AccountIdentity(address=address, display_name=text.lower())


def _forward(service: NameService, name: str):
    async def call() -> Optional[str]:
        return normalize_address(await service.resolve_name(name))

    return call


def _reverse(service: NameService, address: str):
    async def call() -> Optional[str]:
        return await service.lookup_address(address)

    return call
