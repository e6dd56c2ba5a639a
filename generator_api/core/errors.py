# errors the gateway surfaces to the API layer
# ClientInputError -> 400, GenerationError -> 500 {"error": ...}

from typing import Iterable


class ClientInputError(Exception):
    pass


class UnsupportedProviderError(ClientInputError):
    def __init__(self, key: str, allowed: Iterable[str]):
        self.key = key
        self.allowed = tuple(allowed)
        names = ", ".join(f"'{k}'" for k in self.allowed)
        super().__init__(f"Unsupported provider: {key}. Use one of {names}.")


class GenerationError(Exception):
    pass
