import logging

import boto3

import core.constants as constants

logger = logging.getLogger(__name__)

class AwsClientProvider:
    def __init__(self, aws_profile: str = None, aws_region: str = None):
        """
        Wrapper around creation of Boto AWS Clients.
        aws_profile: if not provided, boto3's standard credential chain is used (env vars, shared config, instance role)
        aws_region: if not provided, will use the default region in your local AWS Config
        """
        self._aws_profile = aws_profile
        self._aws_region = aws_region
        self._s3_client = None

    @property
    def aws_profile(self) -> str:
        return self._aws_profile

    @property
    def aws_region(self) -> str:
        return self._aws_region

    def _get_session(self) -> boto3.Session:
        logger.debug(f"Creating AWS Session for profile '{self._aws_profile}' and region '{self._aws_region}'")
        return boto3.Session(profile_name=self._aws_profile, region_name=self._aws_region)

    def get_s3(self):
        # Built once, then shared by every call made through this provider
        if self._s3_client is None:
            session = self._get_session()
            self._s3_client = session.client("s3", api_version=constants.S3_API_VERSION)
        return self._s3_client
