"""Company settings store: one record, loaded, replaced or reset as a whole."""

import logging
import threading

from clients.store import StoreHandle
from core.event_bus import EventBus
from core.events import CompanySettingsChanged
from core.models import CompanySettings

logger = logging.getLogger(__name__)

SETTINGS_KEY = "company_settings"


class SettingsService:
    """Service for company settings. Store failures are logged, not raised."""

    def __init__(self, store: StoreHandle, event_bus: EventBus):
        self.store = store
        self.event_bus = event_bus
        self._settings = CompanySettings.default()
        self._is_loading = False
        self._lock = threading.RLock()

    @property
    def company_settings(self) -> CompanySettings:
        return self._settings

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    def load_settings(self) -> None:
        """Load settings; keeps the defaults if nothing is stored or it can't be decoded."""
        with self._lock:
            self._is_loading = True
            try:
                raw = self.store.open().get(SETTINGS_KEY)
                if raw is not None:
                    self._settings = CompanySettings.from_json(raw)
            except Exception:
                logger.exception("Error loading settings")
                self._settings = CompanySettings.default()
            finally:
                self._is_loading = False
                self._publish()

    def update_company_settings(self, settings: CompanySettings) -> None:
        with self._lock:
            self._settings = settings
            self._publish()
            self._save()

    def reset_to_defaults(self) -> None:
        with self._lock:
            self._settings = CompanySettings.default()
            self._publish()
            self._save()

    def _publish(self) -> None:
        self.event_bus.publish(CompanySettingsChanged.create(self._settings))

    def _save(self) -> None:
        try:
            self.store.open().set(SETTINGS_KEY, self._settings.to_json())
        except Exception:
            logger.exception("Error saving settings")
