"""
Repository Layer - Data Access

This layer handles all Firestore queries and returns domain models.
Repositories abstract away Firestore details from business logic.

Author: TM3
Date: 2025-10-17
"""
from app.repositories.base_repository import FirestoreRepository
from app.repositories.product_repository import ProductRepository
from app.repositories.audit_log_repository import AuditLogRepository
from app.repositories.recycle_bin_repository import RecycleBinRepository
from app.repositories.master_data_repository import MasterDataRepository

__all__ = [
    'FirestoreRepository',
    'ProductRepository',
    'AuditLogRepository',
    'RecycleBinRepository',
    'MasterDataRepository'
]
