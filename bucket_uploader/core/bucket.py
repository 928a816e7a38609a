"""バケットの準備"""
from botocore.exceptions import BotoCoreError, ClientError

from ..utils.logger import LoggerManager
from .errors import ProvisioningError

ALREADY_OWNED_CODE = "BucketAlreadyOwnedByYou"
ALREADY_OWNED_MESSAGE = "You already own this bucket"


def is_already_owned(error: Exception) -> bool:
    """「自分が所有済み」のエラーかどうか

    エラーコードで判定し、取れない場合だけメッセージで判定する。
    """
    if isinstance(error, ClientError):
        code = error.response.get("Error", {}).get("Code")
        if code:
            return code == ALREADY_OWNED_CODE
    return ALREADY_OWNED_MESSAGE in str(error)


def ensure_bucket(client, bucket: str):
    """バケットが無ければ作成する（所有済みなら成功扱い）"""
    logger = LoggerManager.get_logger()
    try:
        client.create_bucket(bucket)
    except (BotoCoreError, ClientError) as e:
        if is_already_owned(e):
            logger.info(f"Bucket already owned: {bucket}")
            return
        logger.error(f"Error creating bucket {bucket}: {e}")
        raise ProvisioningError(str(e), bucket=bucket) from e

    logger.info(f"Bucket created: {bucket}")
