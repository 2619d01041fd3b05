"""Core constants: cleanup scheduling defaults, batch sizes and metric names.

Single source of truth for values shared by the cleanup agent, the
scheduler and settings validation.
"""

# Scheduling facade defaults
DEFAULT_POLL_INTERVAL_SECONDS = 2 * 60
DEFAULT_TIMEOUT_SECONDS = 60
CLEANUP_AGENT_TYPE = "CacheCleanupAgent"
CORE_PROVIDER_NAME = "core"

# Ids per DELETE statement
DEFAULT_DELETE_BATCH_SIZE = 100
MAX_DELETE_BATCH_SIZE = 1000

# Physical cache table naming
CACHE_TABLE_PREFIX = "cats"
CACHE_SCHEMA_VERSION = 1
DEFAULT_MAX_TABLE_NAME_LENGTH = 64

# Metric instrument names
METRIC_RECORDS_DELETED = "sql.cacheCleanupAgent.dataTypeRecordsDeleted"
METRIC_CLEANUP_DURATION = "sql.cacheCleanupAgent.dataTypeCleanupDuration"
