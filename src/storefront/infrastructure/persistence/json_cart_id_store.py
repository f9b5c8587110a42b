"""JSON-file-backed implementation of CartIdStore."""

from __future__ import annotations

import json
from pathlib import Path

from storefront.domain.repository.cart_id_store import CartIdStore


class JsonCartIdStore(CartIdStore):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path

    def load(self) -> str | None:
        if not self._file_path.exists():
            return None
        raw = json.loads(self._file_path.read_text(encoding="utf-8"))
        return raw.get("guest_cart_id")

    def save(self, cart_id: str) -> None:
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        self._file_path.write_text(
            json.dumps({"guest_cart_id": cart_id}, indent=2) + "\n", encoding="utf-8"
        )

    def forget(self) -> None:
        self._file_path.unlink(missing_ok=True)
