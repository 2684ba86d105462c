"""Configuration settings for the case dashboard services."""

import os
from pathlib import Path


def get_log_level():
    """Get log level name from environment variables."""
    return os.environ.get("LOG_LEVEL", "INFO").upper()


def redis_configured():
    """External case store is used only when Redis credentials are present."""
    return bool(os.environ.get("REDIS_HOST"))


def get_redis_host_and_port():
    """Get Redis connection details from environment variables."""
    host = os.environ.get("REDIS_HOST", "localhost")
    port = int(os.environ.get("REDIS_PORT", "6379"))
    config = dict(host=host, port=port)
    password = os.environ.get("REDIS_PASSWORD")
    if password:
        config["password"] = password
    return config


def blob_storage_configured():
    """Uploads go to MinIO only when an access key is configured."""
    return bool(os.environ.get("MINIO_ACCESS_KEY"))


def get_minio_config():
    """Get MinIO connection configuration from environment variables."""
    host = os.environ.get("MINIO_HOST", "localhost")
    port = os.environ.get("MINIO_PORT", "9000")
    endpoint = f"{host}:{port}"
    access_key = os.environ.get("MINIO_ACCESS_KEY", "minioadmin")
    secret_key = os.environ.get("MINIO_SECRET_KEY", "minioadmin123")
    bucket_name = os.environ.get("MINIO_BUCKET", "case-uploads")
    secure = os.environ.get("MINIO_SECURE", "false").lower() == "true"
    scheme = "https" if secure else "http"
    public_url = os.environ.get("MINIO_PUBLIC_URL", f"{scheme}://{endpoint}")

    return dict(
        endpoint=endpoint,
        access_key=access_key,
        secret_key=secret_key,
        bucket_name=bucket_name,
        secure=secure,
        public_url=public_url.rstrip("/"),
    )


def get_uploads_dir():
    """Local directory for uploaded files when no blob storage is configured."""
    return Path(os.environ.get("UPLOADS_DIR", Path.cwd() / "public" / "uploads"))


def get_cases_token():
    """Shared secret for write routes. None disables the check."""
    return os.environ.get("CASES_TOKEN") or None


def get_api_url():
    """Get Case API URL from environment variables."""
    host = os.environ.get("API_HOST", "localhost")
    port = int(os.environ.get("API_PORT", "8000"))
    return os.environ.get("CASE_API_URL", f"http://{host}:{port}")


def get_dashboard_config():
    """Get dashboard client settings from environment variables."""
    timeout = os.environ.get("CASE_API_TIMEOUT")
    return dict(
        api_url=get_api_url(),
        cache_path=Path(os.environ.get("DASHBOARD_CACHE_PATH", Path.cwd() / ".dashboard_cache.json")),
        poll_interval=float(os.environ.get("DASHBOARD_POLL_INTERVAL", "10")),
        timeout=float(timeout) if timeout else None,
    )
