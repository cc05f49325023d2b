import logging
import pytest
import unittest.mock as mock

from botocore.exceptions import EndpointConnectionError
from click.testing import CliRunner

from core.constants import EmptyOutcome
import force_empty_bucket

@pytest.fixture
def restore_root_logger():
    root_logger = logging.getLogger()
    original_handlers = root_logger.handlers[:]
    original_level = root_logger.level
    yield root_logger
    root_logger.handlers = original_handlers
    root_logger.setLevel(original_level)

@pytest.mark.parametrize("outcome, exit_code", [
    (EmptyOutcome.SUCCESS, 0),
    (EmptyOutcome.OBJECTS_FAILED, 1),
    (EmptyOutcome.VERSIONS_FAILED, 2),
    (EmptyOutcome.OTHER_FAILED, 3),
])
@mock.patch("force_empty_bucket.cmd_bucket_empty")
def test_WHEN_cli_called_THEN_exits_with_outcome_code(mock_cmd, outcome, exit_code, restore_root_logger):
    # Set up our mock
    mock_cmd.return_value = outcome

    # Run our test
    result = CliRunner().invoke(force_empty_bucket.cli, ["my-bucket"])

    # Check our results
    assert exit_code == result.exit_code

@mock.patch("force_empty_bucket.cmd_bucket_empty")
def test_WHEN_cli_called_AND_no_options_THEN_uses_defaults(mock_cmd, restore_root_logger):
    # Set up our mock
    mock_cmd.return_value = EmptyOutcome.SUCCESS

    # Run our test
    CliRunner().invoke(force_empty_bucket.cli, ["my-bucket"])

    # Check our results
    expected_calls = [
        mock.call(None, None, "my-bucket", 500)
    ]
    assert expected_calls == mock_cmd.call_args_list

@mock.patch("force_empty_bucket.cmd_bucket_empty")
def test_WHEN_cli_called_AND_short_options_THEN_passes_them(mock_cmd, restore_root_logger):
    # Set up our mock
    mock_cmd.return_value = EmptyOutcome.SUCCESS

    # Run our test
    CliRunner().invoke(force_empty_bucket.cli, ["-r", "eu-west-1", "-b", "250", "-p", "ops", "my-bucket"])

    # Check our results
    expected_calls = [
        mock.call("ops", "eu-west-1", "my-bucket", 250)
    ]
    assert expected_calls == mock_cmd.call_args_list

@mock.patch("force_empty_bucket.cmd_bucket_empty")
def test_WHEN_cli_called_AND_long_options_THEN_passes_them(mock_cmd, restore_root_logger):
    # Set up our mock
    mock_cmd.return_value = EmptyOutcome.SUCCESS

    # Run our test
    CliRunner().invoke(force_empty_bucket.cli, ["--region", "us-east-2", "--bulk-size", "1000", "my-bucket"])

    # Check our results
    expected_calls = [
        mock.call(None, "us-east-2", "my-bucket", 1000)
    ]
    assert expected_calls == mock_cmd.call_args_list

@pytest.mark.parametrize("bulk_size", ["0", "1001", "lots"])
@mock.patch("force_empty_bucket.cmd_bucket_empty")
def test_WHEN_cli_called_AND_bad_bulk_size_THEN_other_failure(mock_cmd, bulk_size, restore_root_logger):
    # Run our test
    result = CliRunner().invoke(force_empty_bucket.cli, ["--bulk-size", bulk_size, "my-bucket"])

    # Check our results
    assert EmptyOutcome.OTHER_FAILED == result.exit_code
    assert "--bulk-size" in result.output
    assert not mock_cmd.called

@mock.patch("force_empty_bucket.cmd_bucket_empty")
def test_WHEN_cli_called_AND_no_bucket_THEN_other_failure(mock_cmd, restore_root_logger):
    # Run our test
    result = CliRunner().invoke(force_empty_bucket.cli, [])

    # Check our results
    assert EmptyOutcome.OTHER_FAILED == result.exit_code
    assert EmptyOutcome.VERSIONS_FAILED != result.exit_code
    assert not mock_cmd.called

def test_WHEN_cli_help_called_THEN_shows_options():
    # Run our test
    result = CliRunner().invoke(force_empty_bucket.cli, ["--help"])

    # Check our results
    assert 0 == result.exit_code
    for option in ["--region", "--bulk-size", "--quiet", "--verbose", "--profile", "--log-file"]:
        assert option in result.output

def _build_empty_bucket_provider():
    mock_s3_client = mock.Mock()
    mock_s3_client.list_objects_v2.return_value = {"KeyCount": 0, "IsTruncated": False}
    mock_s3_client.list_object_versions.return_value = {"IsTruncated": False}

    mock_aws_provider = mock.Mock()
    mock_aws_provider.get_s3.return_value = mock_s3_client
    return mock_aws_provider

@mock.patch("commands.bucket_empty.AwsClientProvider")
def test_WHEN_cli_called_AND_succeeds_THEN_confirms(mock_provider_cls, restore_root_logger):
    # Set up our mock
    mock_provider_cls.return_value = _build_empty_bucket_provider()

    # Run our test
    result = CliRunner().invoke(force_empty_bucket.cli, ["my-bucket"])

    # Check our results
    assert 0 == result.exit_code
    assert "Bucket my-bucket emptied." in result.output
    assert "isLastBatch" not in result.output

@mock.patch("commands.bucket_empty.AwsClientProvider")
def test_WHEN_cli_called_AND_quiet_THEN_no_confirmation(mock_provider_cls, restore_root_logger):
    # Set up our mock
    mock_provider_cls.return_value = _build_empty_bucket_provider()

    # Run our test
    result = CliRunner().invoke(force_empty_bucket.cli, ["--quiet", "--verbose", "my-bucket"])

    # Check our results
    assert 0 == result.exit_code
    assert "" == result.output

@mock.patch("commands.bucket_empty.AwsClientProvider")
def test_WHEN_cli_called_AND_verbose_THEN_shows_diagnostics(mock_provider_cls, restore_root_logger):
    # Set up our mock
    mock_provider_cls.return_value = _build_empty_bucket_provider()

    # Run our test
    result = CliRunner().invoke(force_empty_bucket.cli, ["-v", "my-bucket"])

    # Check our results
    assert 0 == result.exit_code
    assert "0 object(s) listed. isLastBatch=Y" in result.output
    assert "Bucket my-bucket emptied." in result.output

@mock.patch("commands.bucket_empty.AwsClientProvider")
def test_WHEN_cli_called_AND_quiet_AND_fails_THEN_error_still_shown(mock_provider_cls, restore_root_logger):
    # Set up our mock
    mock_aws_provider = _build_empty_bucket_provider()
    mock_aws_provider.get_s3.return_value.list_objects_v2.side_effect = EndpointConnectionError(
        endpoint_url="https://s3.amazonaws.com"
    )
    mock_provider_cls.return_value = mock_aws_provider

    # Run our test
    result = CliRunner().invoke(force_empty_bucket.cli, ["-q", "my-bucket"])

    # Check our results
    assert 1 == result.exit_code
    assert "Failed in deleting the objects in bucket my-bucket." in result.output

@mock.patch("force_empty_bucket.cmd_bucket_empty")
def test_WHEN_cli_called_AND_log_file_dir_missing_THEN_other_failure(mock_cmd, tmp_path, restore_root_logger):
    # Set up our test
    log_path = tmp_path / "missing-dir" / "run.log"

    # Run our test
    result = CliRunner().invoke(force_empty_bucket.cli, ["--log-file", str(log_path), "my-bucket"])

    # Check our results
    assert EmptyOutcome.OTHER_FAILED == result.exit_code
    assert f"Unable to open the log file {log_path}" in result.output
    assert not mock_cmd.called

@mock.patch("force_empty_bucket.cmd_bucket_empty")
def test_WHEN_cli_called_AND_log_file_is_dir_THEN_other_failure(mock_cmd, tmp_path, restore_root_logger):
    # Run our test
    result = CliRunner().invoke(force_empty_bucket.cli, ["--log-file", str(tmp_path), "my-bucket"])

    # Check our results
    assert EmptyOutcome.OTHER_FAILED == result.exit_code
    assert "--log-file" in result.output
    assert not mock_cmd.called

@mock.patch("force_empty_bucket.cmd_bucket_empty")
def test_WHEN_cli_called_AND_log_file_ok_THEN_written(mock_cmd, tmp_path, restore_root_logger):
    # Set up our mock
    mock_cmd.return_value = EmptyOutcome.SUCCESS
    log_path = tmp_path / "run.log"

    # Run our test
    result = CliRunner().invoke(force_empty_bucket.cli, ["-q", "--log-file", str(log_path), "my-bucket"])
    for handler in logging.getLogger().handlers:
        handler.flush()

    # Check our results
    assert 0 == result.exit_code
    log_text = log_path.read_text(encoding="utf8")
    assert f"Debug-level logs save to file: {log_path}" in log_text
    assert "Using AWS Region" in log_text
