"""Test helpers for object store tests."""

import threading
from unittest.mock import MagicMock

from botocore.exceptions import ClientError


def client_error(code: str, operation: str, message: str = "error") -> ClientError:
    """Build a botocore ClientError with the given service error code."""
    return ClientError({'Error': {'Code': code, 'Message': message}}, operation)


class FakeS3:
    """In-memory stand-in for a boto3 S3 client (thread-safe)."""

    def __init__(self):
        self.objects = {}
        self.put_calls = []
        self._lock = threading.Lock()

    def put_object(self, Bucket, Key, Body, **extra):
        with self._lock:
            self.put_calls.append(dict(Bucket=Bucket, Key=Key, Body=Body, **extra))
            self.objects[(Bucket, Key)] = bytes(Body)
        return {'ETag': '"etag"'}

    def get_object(self, Bucket, Key):
        with self._lock:
            if (Bucket, Key) not in self.objects:
                raise client_error('NoSuchKey', 'GetObject', 'The specified key does not exist.')
            data = self.objects[(Bucket, Key)]
        body = MagicMock()
        body.read.return_value = data
        return {'Body': body, 'ContentLength': len(data)}

    def delete_object(self, Bucket, Key):
        with self._lock:
            self.objects.pop((Bucket, Key), None)
        return {}
