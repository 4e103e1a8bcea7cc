"""Run manifest for reproducibility."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional
import uuid


@dataclass
class RunManifest:
    command: str = ""
    run_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    config_hash: Optional[str] = None
    weeks: List[str] = field(default_factory=list)
    counts: Dict[str, int] = field(default_factory=dict)
    outputs: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "command": self.command,
            "run_id": self.run_id,
            "started_at": self.started_at.isoformat(),
            "config_hash": self.config_hash,
            "weeks": list(self.weeks),
            "counts": dict(self.counts),
            "outputs": dict(self.outputs),
        }
