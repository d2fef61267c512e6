from .sample import RawSample, ConvertedReading, HEART_RATE, most_recent
from .convert import to_per_minute
from .units import RATE_PER_SECOND, is_compatible, value_in

__all__ = ["RawSample",
           "ConvertedReading",
           "HEART_RATE",
           "most_recent",
           "to_per_minute",
           "RATE_PER_SECOND",
           "is_compatible",
           "value_in"]
