from dataclasses import dataclass

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS poems (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    timestamp   INTEGER NOT NULL,
    time_string TEXT NOT NULL,
    poem        TEXT NOT NULL,
    model_used  TEXT NOT NULL,
    created_at  DATETIME DEFAULT CURRENT_TIMESTAMP
);
CREATE INDEX IF NOT EXISTS idx_timestamp ON poems(timestamp);
"""


@dataclass(frozen=True)
class PoemRecord:
    timestamp: int  # epoch millis of the minute the poem describes
    time_label: str
    text: str
    model_id: str
    created_at: str | None = None
    id: int | None = None

    @classmethod
    def from_row(cls, row: dict) -> "PoemRecord":
        return cls(
            timestamp=row["timestamp"],
            time_label=row["time_string"],
            text=row["poem"],
            model_id=row["model_used"],
            created_at=row["created_at"],
            id=row["id"],
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "time_string": self.time_label,
            "poem": self.text,
            "model_used": self.model_id,
            "created_at": self.created_at,
        }
