"""Settings repository — key/value state kept alongside the ledger."""

from api.settings.orm.settings_model import SettingModel


class SettingsRepository:
    def __init__(self, store):
        self._store = store

    def get(self, key: str) -> str | None:
        with self._store.session() as session:
            setting = session.get(SettingModel, key)
            return setting.value if setting else None

    def set(self, key: str, value: str) -> None:
        with self._store.session() as session:
            setting = session.get(SettingModel, key)
            if setting is None:
                setting = SettingModel(key=key)
                session.add(setting)
            setting.value = value
            setting.updated_at = self._store.now()
