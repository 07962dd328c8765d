from .directory_service import DirectoryService, start_of_day
from .settings_service import SettingsService
from .cafe_service import CafeService, haversine_km

__all__ = ["DirectoryService", "SettingsService", "CafeService", "start_of_day", "haversine_km"]
