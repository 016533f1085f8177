"""Gold and gilding endpoints."""

from __future__ import annotations

from .client import Client, Response


class GoldService:
    """Gives gold to users and gilds posts and comments."""

    def __init__(self, client: Client) -> None:
        self.client = client

    def gild(self, thing_id: str) -> Response:
        """Gild a post or comment via its full ID. This consumes coins."""
        return self.client.request("POST", f"api/v1/gold/gild/{thing_id}")

    def give(self, username: str, months: int) -> Response:
        """Give the user between 1 and 36 (inclusive) months of gold."""
        if not 1 <= months <= 36:
            raise ValueError("months: must be between 1 and 36 (inclusive)")
        return self.client.request(
            "POST", f"api/v1/gold/give/{username}", form={"months": str(months)}
        )