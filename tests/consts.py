TEST_BUCKET_NAME = "test-bucket-storage-api"
TEST_REGION = "us-east-1"
TEST_BASE_URL = f"https://{TEST_BUCKET_NAME}.s3.{TEST_REGION}.amazonaws.com/"
