from enum import IntEnum

# The S3 API version the tool is written against.  Pinned so that a botocore upgrade can't silently change the shape of
# the listing responses we walk through.
S3_API_VERSION: str = "2006-03-01"

# Bulk size is both the number of keys we ask for per listing call and the number of keys we send per delete call.
# DeleteObjects refuses more than 1000 keys in one request, which is also the ceiling on MaxKeys for the listing APIs.
DEFAULT_BULK_SIZE: int = 500
MIN_BULK_SIZE: int = 1
MAX_BULK_SIZE: int = 1000

class EmptyOutcome(IntEnum):
    """
    The terminal results of an emptying run.  The values double as the process exit codes, so they must stay stable.
    """
    SUCCESS = 0
    OBJECTS_FAILED = 1
    VERSIONS_FAILED = 2
    OTHER_FAILED = 3
