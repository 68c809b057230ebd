import logging
import os
import yaml
import keyring

APP_VERSION = "1.0.0"


class YamlConfig:
    """Settings file in YAML.

    With ``ENCRYPT_SETTINGS=1`` the values of ``SENSITIVE_KEYS`` are kept in
    the OS keyring and the file only records that a keyring entry exists.
    """

    SENSITIVE_KEYS = frozenset({"session_secret"})
    KEYRING_SERVICE = "fittrack"

    def __init__(self, path: str = "settings.yaml") -> None:
        self.path = path
        self.encrypt = os.environ.get("ENCRYPT_SETTINGS") == "1"

    def load(self) -> dict:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not self.encrypt:
            return data
        for key in self.SENSITIVE_KEYS & data.keys():
            secret = keyring.get_password(self.KEYRING_SERVICE, key)
            if secret is None:
                # keyring entry gone, so the setting falls back to its default
                del data[key]
            else:
                data[key] = secret
        return data

    def save(self, data: dict) -> None:
        out = dict(data)
        if self.encrypt:
            for key in self.SENSITIVE_KEYS & out.keys():
                keyring.set_password(self.KEYRING_SERVICE, key, str(out[key]))
                out[key] = True
        with open(self.path, "w", encoding="utf-8") as f:
            yaml.safe_dump(out, f)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the API server and CLI."""
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
