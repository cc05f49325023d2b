import logging
from typing import Optional

from aws_interactions.aws_client_provider import AwsClientProvider
import aws_interactions.s3_interactions as s3
from core.constants import EmptyOutcome
from core.pagination import do_until

logger = logging.getLogger(__name__)

def cmd_bucket_empty(profile: str, region: str, bucket_name: str, bulk_size: int) -> EmptyOutcome:
    logger.debug(f"Invoking bucket-empty with profile '{profile}', region '{region}' and bulk size {bulk_size}")

    aws_provider = AwsClientProvider(aws_profile=profile, aws_region=region)
    return empty_bucket(bucket_name, bulk_size, aws_provider)

def empty_bucket(bucket_name: str, bulk_size: int, aws_provider: AwsClientProvider) -> EmptyOutcome:
    """
    Deletes every current object in the bucket, then every object version and delete marker.  The version pass only
    starts once the object pass has finished successfully.
    """
    try:
        # Surface credential/profile problems before we start either pass
        aws_provider.get_s3()

        logger.debug(f"Deleting the current objects in S3 Bucket {bucket_name}...")
        objects_emptied = do_until(
            action=lambda token: _delete_objects_page(bucket_name, bulk_size, aws_provider, token),
            condition=lambda token: token is None,
            on_error=lambda ex: logger.error(f"Failed in deleting the objects in bucket {bucket_name}. {ex}"),
        )
        if not objects_emptied:
            return EmptyOutcome.OBJECTS_FAILED

        logger.debug(f"Deleting the object versions and delete markers in S3 Bucket {bucket_name}...")
        versions_emptied = do_until(
            action=lambda markers: _delete_versions_page(bucket_name, bulk_size, aws_provider, markers),
            condition=lambda markers: markers is None,
            on_error=lambda ex: logger.error(f"Failed in deleting the versions in bucket {bucket_name}. {ex}"),
        )
        if not versions_emptied:
            return EmptyOutcome.VERSIONS_FAILED
    except Exception as ex:
        logger.error(f"Failed in emptying the bucket {bucket_name}. {ex}")
        return EmptyOutcome.OTHER_FAILED

    logger.info(f"Bucket {bucket_name} emptied.")
    return EmptyOutcome.SUCCESS

def _delete_objects_page(bucket_name: str, bulk_size: int, aws_provider: AwsClientProvider,
        continuation_token: str = None) -> Optional[str]:
    """
    Lists and deletes one page of current objects.  Returns the token for the next page, or None when the pass is done.
    """
    page = s3.list_objects_page(bucket_name, bulk_size, aws_provider, continuation_token=continuation_token)
    is_last_batch = "N" if page.next_continuation_token else "Y"
    logger.debug(f"{len(page.objects)} object(s) listed. isLastBatch={is_last_batch}")

    # An empty page ends the pass even if S3 also handed back a continuation token
    if not page.objects:
        return None

    result = s3.delete_objects(bucket_name, page.objects, aws_provider)
    logger.debug(f"{len(result.deleted)} object(s) deleted")

    return page.next_continuation_token

def _delete_versions_page(bucket_name: str, bulk_size: int, aws_provider: AwsClientProvider,
        markers: s3.VersionMarkers = None) -> Optional[s3.VersionMarkers]:
    """
    Lists one page of versions and delete markers and deletes both together.  Returns the markers for the next page, or
    None when the pass is done.
    """
    page = s3.list_versions_page(bucket_name, bulk_size, aws_provider, markers=markers)
    is_last_batch = "N" if page.is_truncated else "Y"
    logger.debug(f"{len(page.versions)} version(s) and {len(page.delete_markers)} delete marker(s) listed."
                 + f" isLastBatch={is_last_batch}")

    to_delete = page.all_refs()
    if to_delete:
        result = s3.delete_objects(bucket_name, to_delete, aws_provider)
        logger.debug(f"{len(result.deleted)} version(s)/delete marker(s) deleted")

    return page.next_markers
