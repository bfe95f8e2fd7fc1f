from tests.fixtures.app_client import client, gateway, settings  # noqa: F401
from tests.fixtures.aws_fixtures import fake_aws_credentials, mocked_aws, s3_client  # noqa: F401
