"""
Storage service for clothing photos in the S3 bucket
Reference: https://boto3.amazonaws.com/v1/documentation/api/latest/reference/services/s3.html
"""
import asyncio
import logging
import random
import string
import time
from functools import lru_cache
from typing import Any, BinaryIO, Optional, Union
from urllib.parse import quote, unquote

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError, EndpointConnectionError

from closet.core.config import settings
from closet.core.exceptions import StorageException

logger = logging.getLogger(__name__)

MAX_IMAGE_SIZE = 5 * 1024 * 1024  # 5MB
SUPPORTED_CONTENT_TYPES = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}

GENERIC_UPLOAD_ERROR = "Impossible de téléverser l'image. Veuillez réessayer."

# (remote error codes, lowercase message fragments, user-facing message)
_ERROR_TRANSLATIONS = (
    (
        {"NoSuchBucket"},
        ("bucket not found", "bucket does not exist"),
        "Le stockage des images est introuvable. Vérifiez que le bucket « clothes-images » existe.",
    ),
    (
        {"AccessDenied", "AllAccessDisabled", "InvalidAccessKeyId", "SignatureDoesNotMatch"},
        ("row-level security", "access denied", "unauthorized"),
        "Vous n'avez pas l'autorisation de téléverser cette image. Vérifiez les règles d'accès du stockage.",
    ),
    (
        {"EntityTooLarge"},
        ("payload too large", "too large", "maximum allowed size"),
        "L'image est trop volumineuse. La taille maximale est de 5 Mo.",
    ),
    (
        {"InvalidContentType", "UnsupportedMediaType"},
        ("mime type", "content type", "not supported"),
        "Format d'image non pris en charge. Utilisez JPEG, PNG ou WebP.",
    ),
    (
        {"RequestTimeout", "SlowDown", "ServiceUnavailable"},
        ("network", "timeout", "timed out", "failed to fetch"),
        "Erreur réseau pendant l'envoi de l'image. Vérifiez votre connexion et réessayez.",
    ),
)


def translate_storage_error(error: Exception) -> str:
    """
    Map a remote storage error to a French user-facing message.

    Matches the S3 error code first, then known fragments of the message.
    """
    if isinstance(error, EndpointConnectionError):
        return _ERROR_TRANSLATIONS[-1][2]

    code = ""
    message = str(error)
    if isinstance(error, ClientError):
        details = error.response.get("Error", {})
        code = details.get("Code", "")
        message = f"{details.get('Message', '')} {message}"

    lowered = message.lower()
    for codes, fragments, translated in _ERROR_TRANSLATIONS:
        if code in codes or any(fragment in lowered for fragment in fragments):
            return translated
    return GENERIC_UPLOAD_ERROR


@lru_cache()
def get_storage_service() -> 'StorageService':
    """
    Get a singleton StorageService instance.

    Reuses one boto3 client across requests.

    Reference: https://docs.python.org/3/library/functools.html#functools.lru_cache
    """
    return StorageService()


class StorageService:
    """Service for handling clothing photo uploads to S3"""

    def __init__(self, s3_client: Any = None, bucket_name: Optional[str] = None, base_url: Optional[str] = None):
        """Initialize S3 client with credentials from settings"""
        if s3_client is None:
            # Reference: https://boto3.amazonaws.com/v1/documentation/api/latest/guide/configuration.html
            config = Config(
                max_pool_connections=50,
                retries={'max_attempts': 1, 'mode': 'standard'},
                connect_timeout=5,
                read_timeout=10,
            )
            s3_client = boto3.client(
                's3',
                aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
                aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
                region_name=settings.AWS_REGION,
                config=config,
            )

        self.s3_client = s3_client
        self.bucket_name = bucket_name or settings.AWS_S3_BUCKET_NAME
        self.base_url = (base_url or settings.AWS_S3_BASE_URL or self._generate_base_url()).rstrip("/")

    def _generate_base_url(self) -> str:
        """Generate S3 base URL from bucket name and region"""
        # Standard S3 URL format: https://bucket-name.s3.region.amazonaws.com
        return f"https://{self.bucket_name}.s3.{settings.AWS_REGION}.amazonaws.com"

    def get_public_url(self, file_name: str) -> str:
        return f"{self.base_url}/{quote(file_name)}"

    @staticmethod
    def generate_file_name(user_id: str, extension: str = "jpg") -> str:
        """Build a unique object key: <user_id>/<epoch ms>-<random>.<ext>"""
        timestamp = int(time.time() * 1000)
        suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=6))
        return f"{user_id}/{timestamp}-{suffix}.{extension}"

    async def upload_image(
        self,
        file_content: Union[bytes, bytearray, memoryview, BinaryIO],
        file_name: str,
        content_type: str = "image/jpeg",
    ) -> str:
        """
        Upload an image to the bucket (overwriting any object with the same key)
        and return its public URL.

        Accepts raw bytes (web clients) as well as a file-like object (mobile
        clients streaming a local file).

        Raises:
            ValueError: If the content is empty
            StorageException: If S3 rejects the upload (French message)
        """
        if hasattr(file_content, 'read'):
            file_content = file_content.read()
        elif isinstance(file_content, (bytearray, memoryview)):
            file_content = bytes(file_content)

        if not file_content:
            raise ValueError("File is empty")

        start = time.time()
        try:
            await asyncio.to_thread(
                self.s3_client.put_object,
                Bucket=self.bucket_name,
                Key=file_name,
                Body=file_content,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            logger.exception(
                "Couldn't put object '%s' to bucket '%s'.",
                file_name,
                self.bucket_name,
            )
            raise StorageException(translate_storage_error(e), code=_error_code(e)) from e

        logger.info(
            "Put object '%s' to bucket '%s' (%d bytes) in %.2fms.",
            file_name,
            self.bucket_name,
            len(file_content),
            (time.time() - start) * 1000,
        )
        return self.get_public_url(file_name)

    async def delete_image(self, file_name: str) -> None:
        """
        Delete an image by object key.

        Raises:
            StorageException: If S3 rejects the deletion
        """
        try:
            await asyncio.to_thread(
                self.s3_client.delete_object,
                Bucket=self.bucket_name,
                Key=file_name,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to delete image from S3: {e}", exc_info=True)
            raise StorageException(translate_storage_error(e), code=_error_code(e)) from e

        logger.info(f"Deleted image from S3: {file_name}")

    def key_from_url(self, url: str) -> Optional[str]:
        """Object key of a public URL from this bucket, None for foreign URLs"""
        prefix = f"{self.base_url}/"
        if not url.startswith(prefix):
            return None
        return unquote(url[len(prefix):])


def _error_code(error: Exception) -> Optional[str]:
    if isinstance(error, ClientError):
        return error.response.get("Error", {}).get("Code")
    return None
