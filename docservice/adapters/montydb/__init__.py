"""montydb document store adapter."""

from docservice.adapters.montydb.adapter import Datastore

__all__ = ["Datastore"]
