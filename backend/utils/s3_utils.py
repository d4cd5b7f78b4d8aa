import boto3
from botocore.exceptions import ClientError, EndpointConnectionError, NoCredentialsError
import os
import logging
import time
import uuid

logger = logging.getLogger(__name__)

# Reusable S3 client, created on first use
S3_CLIENT = None
AWS_REGION = os.getenv('AWS_DEFAULT_REGION', 'ap-south-1')


def get_bucket_name() -> str:
    return os.getenv('S3_BUCKET_NAME', '')


def is_storage_configured() -> bool:
    """POD storage is switched on by setting S3_BUCKET_NAME."""
    return bool(get_bucket_name())


def get_s3_client():
    """Initializes and returns a reusable S3 client."""
    global S3_CLIENT
    if S3_CLIENT is None:
        S3_CLIENT = boto3.client('s3', region_name=AWS_REGION)
        logger.info(f"S3 client initialized for region: {AWS_REGION}")
    return S3_CLIENT


def _content_type(extension: str) -> str:
    if extension == 'pdf':
        return 'application/pdf'
    if extension in ('jpg', 'jpeg'):
        return 'image/jpeg'
    return f'image/{extension}' if extension else 'application/octet-stream'


def upload_pod_to_s3(tenant_id: str, lr_id: int, filename: str, file_content: bytes,
                     max_retries: int = 3, backoff_base: float = 0.5) -> str:
    """
    Upload a proof-of-delivery scan and return its s3:// path.

    Transient failures are retried with exponential backoff; access and
    missing-bucket errors fail immediately.
    """
    bucket_name = get_bucket_name()
    file_extension = filename.rsplit('.', 1)[-1].lower() if '.' in filename else ''
    s3_key = f"pods/{tenant_id}/{lr_id}_{uuid.uuid4().hex}" + (f".{file_extension}" if file_extension else "")
    s3_client = get_s3_client()

    last_exc = None
    for attempt in range(1, max_retries + 1):
        try:
            logger.info(f"Attempt {attempt} to upload POD for LR {lr_id} to s3://{bucket_name}/{s3_key} ({len(file_content)} bytes)")
            s3_client.put_object(
                Bucket=bucket_name,
                Key=s3_key,
                Body=file_content,
                ContentType=_content_type(file_extension),
            )
            return f"s3://{bucket_name}/{s3_key}"
        except NoCredentialsError:
            logger.exception("No AWS credentials found for S3 upload")
            raise
        except (EndpointConnectionError, ClientError) as e:
            last_exc = e
            code = e.response.get('Error', {}).get('Code') if isinstance(e, ClientError) else None
            logger.warning(f"S3 upload attempt {attempt} failed for LR {lr_id}, code={code}: {e}")
            if code in ('403', 'AccessDenied'):
                raise RuntimeError(f"S3 access denied. Check IAM permissions for bucket: {bucket_name}")
            if code in ('404', 'NoSuchBucket'):
                raise RuntimeError(f"S3 bucket not found: {bucket_name}. Check bucket name and region.")
            if code and str(code).startswith('4'):
                break
            if attempt < max_retries:
                time.sleep(backoff_base * (2 ** (attempt - 1)))

    logger.error(f"S3 upload failed permanently for LR {lr_id}: {last_exc}")
    raise RuntimeError(f"S3 upload failed: {last_exc}")


def generate_presigned_download_url(s3_path: str, expires_in: int = 3600) -> str:
    """
    Generates a pre-signed URL for downloading a file directly from S3.

    Args:
        s3_path: The full S3 path (e.g., 's3://bucket-name/key').
        expires_in: Time in seconds for the presigned URL to remain valid.

    Returns:
        The presigned URL for downloading the object.
    """
    bucket_name = get_bucket_name()
    if not s3_path.startswith(f's3://{bucket_name}/'):
        raise ValueError(f"Invalid S3 path format. Must start with 's3://{bucket_name}/'")

    s3_key = s3_path.replace(f's3://{bucket_name}/', '', 1)
    try:
        url = get_s3_client().generate_presigned_url(
            'get_object',
            Params={'Bucket': bucket_name, 'Key': s3_key},
            ExpiresIn=expires_in
        )
        logger.info(f"Generated presigned download URL for key: {s3_key}")
        return url
    except ClientError as e:
        logger.exception(f"Failed to generate presigned download URL for key: {s3_key}")
        if e.response['Error']['Code'] == 'NoSuchKey':
            raise FileNotFoundError(f"File not found in S3 at path: {s3_path}")
        raise RuntimeError(f"Could not generate S3 download URL: {e}")
