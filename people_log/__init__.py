"""Personal interaction log: parse, aggregate and summarize."""

from .aggregation import aggregate
from .config import AppConfig
from .parser import parse
from .pipeline import PeopleLogPipeline

__all__ = ["AppConfig", "PeopleLogPipeline", "aggregate", "parse"]
