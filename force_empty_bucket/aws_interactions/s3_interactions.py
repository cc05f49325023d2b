from dataclasses import dataclass, field
import logging
from typing import Dict, List

from botocore.exceptions import BotoCoreError, ClientError

from aws_interactions.aws_client_provider import AwsClientProvider
import core.constants as constants

logger = logging.getLogger(__name__)

class RemoteListError(Exception):
    def __init__(self, bucket_name: str, cause: Exception):
        self.bucket_name = bucket_name
        self.cause = cause
        super().__init__(f"Unable to list the contents of S3 bucket {bucket_name}: {cause}")

class MarkersOutOfSync(Exception):
    def __init__(self, next_key_marker: str, next_version_id_marker: str):
        self.next_key_marker = next_key_marker
        self.next_version_id_marker = next_version_id_marker
        super().__init__("The version listing was truncated but did not return both a key marker and a version id"
                         + f" marker (key marker: {next_key_marker}, version id marker: {next_version_id_marker})")

class RemoteDeleteError(Exception):
    def __init__(self, bucket_name: str, cause: Exception):
        self.bucket_name = bucket_name
        self.cause = cause
        super().__init__(f"Unable to delete objects from S3 bucket {bucket_name}: {cause}")

class PartialDeleteError(RemoteDeleteError):
    def __init__(self, bucket_name: str, errors: List[Dict[str, str]]):
        self.errors = errors
        first = errors[0]
        summary = (f"{len(errors)} key(s) could not be deleted; first failure was key '{first.get('Key')}'"
                   + f" ({first.get('Code')}: {first.get('Message')})")
        super().__init__(bucket_name, summary)

@dataclass
class ObjectRef:
    key: str
    version_id: str = None

    def to_delete_entry(self) -> Dict[str, str]:
        if self.version_id:
            return {"Key": self.key, "VersionId": self.version_id}
        return {"Key": self.key}

    @classmethod
    def from_listing(cls, entry: Dict[str, str]) -> "ObjectRef":
        return cls(key=entry["Key"], version_id=entry.get("VersionId"))

@dataclass
class ObjectPage:
    objects: List[ObjectRef]
    next_continuation_token: str = None

@dataclass
class VersionMarkers:
    """
    Where the next page of a version listing starts.  The two markers only mean something together, so they travel as
    one value.
    """
    key_marker: str
    version_id_marker: str

@dataclass
class VersionPage:
    versions: List[ObjectRef]
    delete_markers: List[ObjectRef]
    is_truncated: bool
    next_markers: VersionMarkers = None

    def all_refs(self) -> List[ObjectRef]:
        return self.versions + self.delete_markers

@dataclass
class DeleteResult:
    deleted: List[ObjectRef] = field(default_factory=list)

def list_objects_page(bucket_name: str, page_size: int, aws_provider: AwsClientProvider,
        continuation_token: str = None) -> ObjectPage:
    """
    Lists a single page of the current objects in the bucket.  The page's continuation token is only set if there are
    more pages to come.
    """
    s3_client = aws_provider.get_s3()

    list_args = {
        "Bucket": bucket_name,
        "MaxKeys": page_size,
    }
    if continuation_token:
        list_args["ContinuationToken"] = continuation_token

    try:
        response = s3_client.list_objects_v2(**list_args)
    except (ClientError, BotoCoreError) as ex:
        raise RemoteListError(bucket_name, ex)

    # Contents is omitted entirely, rather than being empty, when there's nothing to list
    objects = [ObjectRef.from_listing(entry) for entry in response.get("Contents", [])]
    return ObjectPage(
        objects=objects,
        next_continuation_token=response.get("NextContinuationToken")
    )

def list_versions_page(bucket_name: str, page_size: int, aws_provider: AwsClientProvider,
        markers: VersionMarkers = None) -> VersionPage:
    """
    Lists a single page of object versions and delete markers.  When the listing is not truncated the next markers are
    always None, whatever the raw response contained.
    """
    s3_client = aws_provider.get_s3()

    list_args = {
        "Bucket": bucket_name,
        "MaxKeys": page_size,
    }
    if markers:
        list_args["KeyMarker"] = markers.key_marker
        list_args["VersionIdMarker"] = markers.version_id_marker

    try:
        response = s3_client.list_object_versions(**list_args)
    except (ClientError, BotoCoreError) as ex:
        raise RemoteListError(bucket_name, ex)

    is_truncated = bool(response.get("IsTruncated", False))
    next_markers = None
    if is_truncated:
        next_key_marker = response.get("NextKeyMarker")
        next_version_id_marker = response.get("NextVersionIdMarker")
        if not (next_key_marker and next_version_id_marker):
            raise RemoteListError(bucket_name, MarkersOutOfSync(next_key_marker, next_version_id_marker))
        next_markers = VersionMarkers(next_key_marker, next_version_id_marker)

    return VersionPage(
        versions=[ObjectRef.from_listing(entry) for entry in response.get("Versions", [])],
        delete_markers=[ObjectRef.from_listing(entry) for entry in response.get("DeleteMarkers", [])],
        is_truncated=is_truncated,
        next_markers=next_markers
    )

def delete_objects(bucket_name: str, refs: List[ObjectRef], aws_provider: AwsClientProvider) -> DeleteResult:
    """
    Deletes a batch of objects/versions/delete markers in one call.  Any per-key failure reported by S3 fails the whole
    batch with a PartialDeleteError.
    """
    if len(refs) > constants.MAX_BULK_SIZE:
        raise ValueError(f"Can't delete {len(refs)} objects in one call; the limit is {constants.MAX_BULK_SIZE}")

    s3_client = aws_provider.get_s3()

    try:
        response = s3_client.delete_objects(
            Bucket=bucket_name,
            Delete={
                "Objects": [ref.to_delete_entry() for ref in refs],
            }
        )
    except (ClientError, BotoCoreError) as ex:
        raise RemoteDeleteError(bucket_name, ex)

    errors = response.get("Errors", [])
    if errors:
        raise PartialDeleteError(bucket_name, errors)

    return DeleteResult(
        deleted=[ObjectRef.from_listing(entry) for entry in response.get("Deleted", [])]
    )
