from sqlalchemy.orm import Session

from ticketpro.models.system_setting import SystemSetting


class SettingsRepository:
    def __init__(self, db: Session):
        self.db = db

    def all(self) -> dict[str, str]:
        return {s.key: s.value for s in self.db.query(SystemSetting).order_by(SystemSetting.key).all()}

    def set(self, key: str, value: str) -> None:
        s = self.db.get(SystemSetting, key)
        if not s:
            self.db.add(SystemSetting(key=key, value=value))
        else:
            s.value = value
        self.db.flush()
