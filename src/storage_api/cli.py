# cli.py
import logging

import click
from botocore.exceptions import ClientError

from storage_api.aws_clients import create_s3_client
from storage_api.config.settings import get_settings

logger = logging.getLogger(__name__)


@click.group()
def cli():
    """CLI commands for the Storage API"""
    pass


@cli.command()
def show_config():
    """Show current configuration"""
    settings = get_settings()
    bucket_config = settings.bucket_config()

    click.echo("Current Configuration:")
    click.echo(f"  Deployment Mode: {settings.deployment_mode}")
    click.echo(f"  AWS Region: {settings.aws_region}")
    click.echo(f"  AWS Endpoint: {settings.aws_endpoint_url}")
    click.echo(f"  S3 Bucket: {settings.s3_bucket_name}")
    click.echo(f"  Bucket Base URL: {bucket_config.base_url}")
    click.echo(f"  List Page Size: {settings.s3_list_page_size}")
    click.echo(f"  Log Level: {settings.log_level}")


@cli.command()
@click.option("--host", default="0.0.0.0", show_default=True, help="Interface to bind")
@click.option("--port", default=8000, show_default=True, type=int, help="Port to listen on")
@click.option("--reload", is_flag=True, help="Restart on code changes (development only)")
def serve(host, port, reload):
    """Run the API under uvicorn"""
    import uvicorn

    settings = get_settings()
    logging.basicConfig(level=settings.log_level)
    logger.info(f"Starting Storage API on {host}:{port} in {settings.deployment_mode} mode")
    uvicorn.run(
        "storage_api.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@cli.command()
def create_bucket():
    """Create the configured bucket (local/moto development)"""
    settings = get_settings()
    s3_client = create_s3_client(settings)
    bucket_name = settings.s3_bucket_name

    create_kwargs = {"Bucket": bucket_name}
    # us-east-1 is the one region S3 rejects as an explicit location constraint
    if settings.aws_region != "us-east-1":
        create_kwargs["CreateBucketConfiguration"] = {"LocationConstraint": settings.aws_region}

    try:
        s3_client.create_bucket(**create_kwargs)
    except ClientError as e:
        code = (e.response.get("Error") or {}).get("Code")
        if code == "BucketAlreadyOwnedByYou":
            click.echo(f"Bucket {bucket_name} already exists")
            return
        raise click.ClickException(f"Failed to create bucket {bucket_name}: {e}")
    click.echo(f"Created bucket {bucket_name}")


if __name__ == "__main__":
    cli()
