"""S3クライアント管理"""
from typing import Optional, Dict, List

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..models.config import AWSConfig
from ..utils.logger import LoggerManager
from .errors import AuthError


class S3ClientManager:
    """S3クライアントの作成と管理"""

    def __init__(self, aws_config: AWSConfig):
        self.aws_config = aws_config
        self.logger = LoggerManager.get_logger()
        self._client = None

    def get_client(self):
        """S3クライアントを取得（必要に応じて作成）"""
        if self._client is None:
            self._client = self._create_client()
        return self._client

    def get_storage_client(self) -> 'StorageClient':
        """アップロード用のストレージクライアントを取得"""
        return StorageClient(self.get_client(), self.aws_config.region)

    def _create_client(self):
        """S3クライアントを作成"""
        try:
            if self.aws_config.assume_role:
                credentials = self._assume_role()
                s3_client = boto3.client(
                    's3',
                    region_name=self.aws_config.region,
                    endpoint_url=self.aws_config.endpoint_url,
                    aws_access_key_id=credentials['access_key_id'],
                    aws_secret_access_key=credentials['secret_access_key'],
                    aws_session_token=credentials['session_token']
                )
                self.logger.info("S3 client created with assumed role credentials.")
                return s3_client

            session = boto3.Session(profile_name=self.aws_config.profile)
            s3_client = session.client(
                's3',
                region_name=self.aws_config.region,
                endpoint_url=self.aws_config.endpoint_url
            )
            self.logger.info("S3 client created with default credentials.")
            return s3_client

        except AuthError:
            raise
        except (BotoCoreError, ClientError) as e:
            self.logger.error(f"Error creating S3 client: {e}")
            raise AuthError(str(e)) from e

    def _assume_role(self) -> Dict[str, str]:
        """AssumeRoleを実行して一時的な認証情報を取得"""
        assume_role_config = self.aws_config.assume_role

        try:
            endpoint_url = f"https://sts.{self.aws_config.region}.amazonaws.com"
            session = boto3.Session(profile_name=self.aws_config.profile)
            sts_client = session.client(
                'sts',
                region_name=self.aws_config.region,
                endpoint_url=endpoint_url
            )

            assume_role_params = {
                'RoleArn': assume_role_config.role_arn,
                'RoleSessionName': assume_role_config.session_name,
                'DurationSeconds': assume_role_config.duration_seconds,
            }
            if assume_role_config.external_id:
                assume_role_params['ExternalId'] = assume_role_config.external_id

            response = sts_client.assume_role(**assume_role_params)
            credentials = response['Credentials']

            self.logger.info(f"Assumed role successfully: {assume_role_config.role_arn}")

            return {
                'access_key_id': credentials['AccessKeyId'],
                'secret_access_key': credentials['SecretAccessKey'],
                'session_token': credentials['SessionToken']
            }

        except (BotoCoreError, ClientError) as e:
            self.logger.error(f"Error assuming role: {e}")
            raise AuthError(str(e)) from e


class StorageClient:
    """バケット作成と書き込みストリームだけを提供する薄いラッパー

    boto3 のクライアントはスレッドセーフなので、全ワーカーで共有してよい。
    """

    def __init__(self, s3_client, region: Optional[str] = None):
        self.s3_client = s3_client
        self.region = region

    def create_bucket(self, bucket: str):
        """バケットを作成"""
        params = {'Bucket': bucket}
        # us-east-1 では LocationConstraint を指定するとエラーになる
        if self.region and self.region != 'us-east-1':
            params['CreateBucketConfiguration'] = {'LocationConstraint': self.region}
        self.s3_client.create_bucket(**params)

    def open_write_stream(self, bucket: str, key: str) -> 'S3WriteStream':
        """オブジェクトへの書き込みストリームを開く"""
        return S3WriteStream(self.s3_client, bucket, key)


class S3WriteStream:
    """オブジェクト書き込み用のシンク

    write() はメモリ上に溜めるだけで、close() 時に PutObject を1回だけ発行する。
    """

    def __init__(self, s3_client, bucket: str, key: str):
        self.s3_client = s3_client
        self.bucket = bucket
        self.key = key
        self.content_type: Optional[str] = None
        self._chunks: List[bytes] = []
        self._written = False
        self._closed = False

    def set_content_type(self, content_type: str):
        """Content-Type を設定（最初の write より前のみ）"""
        if self._written:
            raise ValueError("content type must be set before the first write")
        self.content_type = content_type

    def write(self, data: bytes) -> int:
        if self._closed:
            raise ValueError(f"write to closed stream: {self.bucket}/{self.key}")
        self._written = True
        self._chunks.append(bytes(data))
        return len(data)

    def close(self):
        """バッファ全体をアップロード"""
        if self._closed:
            return
        self._closed = True

        params = {
            'Bucket': self.bucket,
            'Key': self.key,
            'Body': self._body(),
        }
        if self.content_type:
            params['ContentType'] = self.content_type
        self.s3_client.put_object(**params)
        self._chunks = []

    def _body(self) -> bytes:
        # 1回だけ書かれた場合はコピーせずにそのまま渡す
        if len(self._chunks) == 1:
            return self._chunks[0]
        return b"".join(self._chunks)
