from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional


@dataclass
class Album:
    """One music release. ``id`` is None until the store assigns one."""
    title: str
    artist: str
    price: float
    id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        return {"id": d["id"], "title": d["title"], "artist": d["artist"], "price": d["price"]}

    def __str__(self) -> str:
        return f"{{{self.id} {self.title} {self.artist} {self.price}}}"
