"""Lambda handler for the Storage API using Mangum."""
from mangum import Mangum

from storage_api.main import create_app

app = create_app()

# Wrap with Mangum for Lambda compatibility
handler = Mangum(app, lifespan="off")

# Export handler for Lambda runtime
lambda_handler = handler
