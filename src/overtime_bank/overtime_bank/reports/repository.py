from __future__ import annotations

from typing import Protocol, Sequence


class OwnerDirectory(Protocol):
    def list_active_owner_ids(self) -> Sequence[str]:
        raise NotImplementedError
