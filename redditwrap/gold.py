"""Gold related API calls."""

from __future__ import annotations

from .transport import Response, Transport


class GoldService:
    """Gild things and give gold."""

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    def gild(self, id: str) -> Response:
        """Gild a post or comment by its full ID. Consumes coins."""
        _, response = self._transport.request("POST", f"api/v1/gold/gild/{id}")
        return response

    def give(self, username: str, months: int) -> Response:
        """Give a user between 1 and 36 months of gold. Consumes coins."""
        if not 1 <= months <= 36:
            raise ValueError("months: must be between 1 and 36 (inclusive)")
        _, response = self._transport.request(
            "POST", f"api/v1/gold/give/{username}", form={"months": months}
        )
        return response