#!/usr/bin/env python3
import logging
import sys

import click

from commands.bucket_empty import cmd_bucket_empty
import core.constants as constants
from core.constants import EmptyOutcome
from core.logging_wrangler import LoggingConfig, LoggingWrangler, set_boto_log_level

logger = logging.getLogger(__name__)

class OutcomeExitCodeCommand(click.Command):
    """
    Reports bad invocations with the "other failure" exit code.  Click's own usage-error code (2) is already taken by
    the version-deletion pass.
    """
    def main(self, *args, standalone_mode=True, **kwargs):
        try:
            return super().main(*args, standalone_mode=False, **kwargs)
        except click.ClickException as ex:
            ex.show()
        except click.Abort:
            click.echo("Aborted!", err=True)
        sys.exit(int(EmptyOutcome.OTHER_FAILED))

@click.command(
    cls=OutcomeExitCodeCommand,
    help=("Force-empties the S3 bucket BUCKET: deletes every object and, for versioned buckets, every object version"
          + " and delete marker, so that the bucket itself can then be destroyed.  There is no confirmation prompt and"
          + " the deletion can't be undone.  Uses your AWS credentials to determine which account it will act against.")
)
@click.argument("bucket")
@click.option("--region", "-r", help="The AWS Region to perform the operation in.  Uses your AWS Config default if not supplied.")
@click.option(
    "--profile",
    "-p",
    help="The AWS credential profile to perform the operation with.  Uses the standard boto3 credential chain if not supplied.",
    default=None
)
@click.option(
    "--bulk-size",
    "-b",
    help=(f"Number of objects to be deleted in one batch ({constants.MIN_BULK_SIZE}...{constants.MAX_BULK_SIZE})."
          + f"  Default: {constants.DEFAULT_BULK_SIZE}"),
    default=constants.DEFAULT_BULK_SIZE,
    type=click.IntRange(constants.MIN_BULK_SIZE, constants.MAX_BULK_SIZE),
)
@click.option(
    "--quiet",
    "-q",
    help="Display nothing but critical error messages",
    is_flag=True,
    show_default=True,
    default=False
)
@click.option(
    "--verbose",
    "-v",
    help="Display verbose messages for troubleshooting",
    is_flag=True,
    show_default=True,
    default=False
)
@click.option(
    "--log-file",
    help="Append DEBUG-level logs of the run to this file",
    default=None,
    type=click.Path(dir_okay=False, writable=True),
)
def cli(bucket, region, profile, bulk_size, quiet, verbose, log_file):
    try:
        logging_wrangler = LoggingWrangler(LoggingConfig(quiet=quiet, verbose=verbose, log_file=log_file))
    except OSError as ex:
        # The console handlers are already in place by the time the log file is opened
        logger.error(f"Unable to open the log file {log_file}: {ex}")
        sys.exit(int(EmptyOutcome.OTHER_FAILED))

    if logging_wrangler.log_file:
        logger.debug(f"Debug-level logs save to file: {logging_wrangler.log_file}")
    logger.debug(f"Using AWS Credential Profile: {profile if profile else 'default credential chain'}")
    region_str = region if region else "default from AWS Config settings"
    logger.debug(f"Using AWS Region: {region_str}")

    outcome = cmd_bucket_empty(profile, region, bucket, bulk_size)
    sys.exit(int(outcome))

def main():
    with set_boto_log_level("WARNING"): # Prevent overwhelming boto spam in our verbose output
        cli()

if __name__ == "__main__":
    main()
