"""
Configuration management for graph replicas.
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class LogLevel(Enum):
    """Log levels accepted in configuration."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


@dataclass
class ReplicaConfig:
    """Configuration for a single replica."""
    replica_id: str
    log_level: LogLevel = LogLevel.WARNING
    track_stats: bool = True    # Count operations in ReplicaStats

    def __post_init__(self):
        if not self.replica_id:
            raise ValueError("replica_id must be a non-empty string")
        if isinstance(self.log_level, str):
            self.log_level = LogLevel(self.log_level.upper())

    @classmethod
    def from_env(cls, replica_id: str) -> 'ReplicaConfig':
        """Build a config, taking the log level from LWWGRAPH_LOG_LEVEL."""
        level = os.environ.get("LWWGRAPH_LOG_LEVEL", LogLevel.WARNING.value)
        return cls(replica_id=replica_id, log_level=level)


def configure_logging(level=LogLevel.WARNING):
    """Install a root handler for the library loggers."""
    if isinstance(level, LogLevel):
        level = level.value
    logging.basicConfig(level=getattr(logging, level.upper()), format=LOG_FORMAT)


def get_default_config(replica_id: str) -> ReplicaConfig:
    """Get default configuration for a replica."""
    return ReplicaConfig(replica_id=replica_id)
