"""
Storage service abstractions.
"""
from .base import ObjectStoreClient, FileStorageEngine
from .b2_client import B2Client, AccountAuthorization, UploadTarget, build_session
from .engine import B2FileStorageEngine, generate_file_name

__all__ = [
    'ObjectStoreClient', 'FileStorageEngine',
    'B2Client', 'AccountAuthorization', 'UploadTarget', 'build_session',
    'B2FileStorageEngine', 'generate_file_name',
]
