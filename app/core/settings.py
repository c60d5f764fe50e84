from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List


def _flag(name: str, default: str) -> bool:
    return os.environ.get(name, default) not in ("0", "false", "False")


def _csv(name: str, default: str) -> List[str]:
    return [v.strip() for v in os.environ.get(name, default).split(",") if v.strip()]


@dataclass(frozen=True)
class Settings:
    # Runtime
    app_env: str = os.environ.get("APP_ENV", "development")
    host: str = os.environ.get("HOST", "0.0.0.0")
    port: int = int(os.environ.get("PORT", "5000"))
    log_level: str = os.environ.get("LOG_LEVEL", "INFO")
    cors_origins: List[str] = field(
        default_factory=lambda: _csv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173")
    )
    metrics_enabled: bool = _flag("METRICS_ENABLED", "1")

    # AWS
    aws_region: str = os.environ.get("AWS_REGION", "us-east-1")
    dynamodb_endpoint_url: str = os.environ.get("DYNAMODB_ENDPOINT_URL", "")

    # DynamoDB tables
    users_table_name: str = os.environ.get("USERS_TABLE", "users")
    posts_table_name: str = os.environ.get("POSTS_TABLE", "posts")
    comments_table_name: str = os.environ.get("COMMENTS_TABLE", "comments")
    notifications_table_name: str = os.environ.get("NOTIFICATIONS_TABLE", "notifications")

    users_email_index: str = os.environ.get("USERS_EMAIL_INDEX", "email-index")
    comments_post_index: str = os.environ.get("COMMENTS_POST_INDEX", "post_id-index")
    comments_parent_index: str = os.environ.get("COMMENTS_PARENT_INDEX", "parent_comment-index")

    # Auth
    jwt_secret: str = os.environ.get("JWT_SECRET", "")
    jwt_algorithm: str = "HS256"
    token_ttl_seconds: int = int(os.environ.get("TOKEN_TTL_SECONDS", str(24 * 3600)))
    bcrypt_rounds: int = int(os.environ.get("BCRYPT_ROUNDS", "10"))

    # Notifications
    notifications_limit: int = int(os.environ.get("NOTIFICATIONS_LIMIT", "50"))

    # Uploads
    upload_bucket: str = os.environ.get("UPLOAD_BUCKET", "")
    upload_public_base_url: str = os.environ.get("UPLOAD_PUBLIC_BASE_URL", "").rstrip("/")
    upload_require_auth: bool = _flag("UPLOAD_REQUIRE_AUTH", "0")


S = Settings()
