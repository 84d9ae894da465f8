"""Journey log: one line per engine event, tagged with the journey it belongs to."""

import json
from datetime import datetime
from typing import Optional, Callable

JOURNEY_TAG_LENGTH = 8


class Logger:
    """Writes engine events to stdout, an optional file and an optional callback.

    Lines look like ``[time] [journey] message | {"json": "data"}``. The
    journey tag is present between `set_journey(id)` and `set_journey(None)`;
    the log file gets a banner each time a new journey begins.
    """

    def __init__(self, log_path: Optional[str] = None, callback: Optional[Callable] = None,
                 echo: bool = True):
        self.log_path = log_path
        self.callback = callback
        self.echo = echo
        self.journey_id: Optional[str] = None
        self.file = None
        if log_path:
            self.file = open(log_path, "a")
            self._banner(f"Wayfarer Log - {datetime.now().isoformat()}")

    def _banner(self, title: str):
        if self.file:
            self.file.write(f"\n{'='*60}\n{title}\n{'='*60}\n\n")
            self.file.flush()

    @property
    def journey_tag(self) -> Optional[str]:
        if self.journey_id is None:
            return None
        return self.journey_id[:JOURNEY_TAG_LENGTH]

    def set_journey(self, journey_id: Optional[str]):
        """Tag following lines with `journey_id`; None clears the tag"""
        if journey_id == self.journey_id:
            return
        self.journey_id = journey_id
        if journey_id is not None:
            self._banner(f"Journey {journey_id} - {datetime.now().isoformat()}")

    def format(self, message: str, data: Optional[dict] = None) -> str:
        line = f"[{datetime.now().isoformat()}]"
        if self.journey_tag:
            line += f" [{self.journey_tag}]"
        line += f" {message}"
        if data:
            line += f" | {json.dumps(data, default=str)}"
        return line

    def log(self, message: str, data: Optional[dict] = None):
        line = self.format(message, data)
        if self.echo:
            print(line)
        if self.file:
            self.file.write(line + "\n")
            self.file.flush()
        if self.callback:
            self.callback(message, data)

    def close(self):
        if self.file:
            self.file.close()
            self.file = None
