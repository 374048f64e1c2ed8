from pulsechart.infrastructure.persistence.preferences_store import JsonPreferencesStore

__all__ = ["JsonPreferencesStore"]
