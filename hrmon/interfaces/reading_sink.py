from typing import Protocol
from hrmon.model.sample import ConvertedReading


class ReadingSink(Protocol):
    def on_reading(self, reading: ConvertedReading) -> None: ...
    def close(self) -> None: ...
