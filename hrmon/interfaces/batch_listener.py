from typing import Iterable, Protocol
from hrmon.model.sample import RawSample


class BatchListener(Protocol):
    def on_batch(self, batch: Iterable[RawSample]) -> None: ...
