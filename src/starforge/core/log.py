from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any

from .ids import StarId, FactionId


@dataclass
class GenerationEntry:
    type: str
    count: int = 0
    star_id: Optional[StarId] = None
    faction_id: Optional[FactionId] = None
    reason: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)


class GenerationLog:
    """Ordered record of what each pipeline stage produced."""

    def __init__(self):
        self.entries: List[GenerationEntry] = []

    def add_entry(
        self,
        type: str,
        count: int = 0,
        star_id: Optional[StarId] = None,
        faction_id: Optional[FactionId] = None,
        reason: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        entry = GenerationEntry(
            type=type,
            count=count,
            star_id=star_id,
            faction_id=faction_id,
            reason=reason,
            details=details or {},
        )
        self.entries.append(entry)

    def of_type(self, type: str) -> List[GenerationEntry]:
        return [entry for entry in self.entries if entry.type == type]
