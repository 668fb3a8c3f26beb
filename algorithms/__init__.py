from .date_resolver import DateResolver
from .set_extractor import SetExtractor

__all__ = ["DateResolver", "SetExtractor"]
