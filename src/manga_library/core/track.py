"""Tracking record entity linking a library entry to a tracking service."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Track:
    id: Optional[int]
    entry_id: int
    service_id: int
    remote_id: int = 0
    title: str = ""
    status: int = 0
    score: float = 0.0
    last_chapter_read: int = 0
    total_chapters: int = 0
