from .local_store import InMemoryPackageResolver, LocalStoreResolver

__all__ = ['InMemoryPackageResolver', 'LocalStoreResolver']
