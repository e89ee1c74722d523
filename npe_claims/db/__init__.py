"""Database layer for NPE Claims Analytics."""

from npe_claims.db.connection import create_engine_from_config, create_engine_from_url
from npe_claims.db.protocol import DatasetWriterProtocol

__all__ = [
    "create_engine_from_config",
    "create_engine_from_url",
    "DatasetWriterProtocol",
]
