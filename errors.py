class UnresolvableIdentity(ValueError):
    """Input is neither a hex address nor a name any resolver could map to one."""

    def __init__(self, raw_input: str):
        self.raw_input = raw_input
        super().__init__(
            f"Invalid wallet address or unresolvable ENS name: {raw_input!r}"
        )


class NetworkCapabilityUnavailable(RuntimeError):
    """A network cannot answer a query (not configured, unsupported, or down)."""


class MetadataLookupFailed(RuntimeError):
    """A single block or asset lookup failed."""
