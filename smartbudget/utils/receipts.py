import io
import logging
from typing import Optional

import boto3
from botocore.exceptions import ClientError

from smartbudget.core.config import settings

logger = logging.getLogger(__name__)

# Initialize S3 client using default AWS credential chain
# (environment variables, AWS credentials file, or IAM role)
s3 = boto3.client("s3", region_name=settings.S3_REGION)

ALLOWED_CONTENT_TYPES = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/heic": "heic",
}
MAX_RECEIPT_BYTES = 5 * 1024 * 1024


def upload_receipt(user_id: str, transaction_id: str, content: bytes, content_type: str) -> Optional[str]:
    """Upload a receipt image and return its public URL, or None on failure."""
    extension = ALLOWED_CONTENT_TYPES[content_type]
    s3_key = f"receipts/{user_id}/{transaction_id}.{extension}"
    try:
        s3.upload_fileobj(
            io.BytesIO(content),
            settings.S3_BUCKET_NAME,
            s3_key,
            ExtraArgs={"ContentType": content_type},
        )
        return f"https://{settings.S3_BUCKET_NAME}.s3.{settings.S3_REGION}.amazonaws.com/{s3_key}"
    except ClientError as e:
        logger.error(f"Failed to upload receipt: {e}")
        return None
