"""Data access: remote data service adapters and the customer repository."""

from .customer_repository import CustomerRepository, RepositoryResult
from .data_service import DataService
from .supabase_data_service import SupabaseDataService

__all__ = [
    "CustomerRepository",
    "DataService",
    "RepositoryResult",
    "SupabaseDataService",
]
