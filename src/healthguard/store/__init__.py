"""Village storage."""

from healthguard.store.repository import JsonFileVillageRepository, VillageRepository
from healthguard.store.seed import initial_villages
from healthguard.store.snapshot import load_villages, save_villages

__all__ = [
    "JsonFileVillageRepository",
    "VillageRepository",
    "initial_villages",
    "load_villages",
    "save_villages",
]
