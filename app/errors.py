"""
app/errors.py — Exceptions raised by the engine, services and store.

The API layer translates these into HTTP status codes; everything else
propagates unchanged.
"""


class CRMError(Exception):
    """Base class for expected, user-facing failures."""


class ClientNotFoundError(CRMError):
    def __init__(self, client_id):
        self.client_id = client_id
        super().__init__(f"Client {client_id} not found.")


class EmptyInputError(CRMError):
    """An operation that needs at least one record received none."""


class ValidationError(CRMError):
    """Malformed input fields. `errors` maps field name → message."""

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))
