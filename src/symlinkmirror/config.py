import json
from dataclasses import dataclass
from pathlib import Path


def _user_config_dir() -> Path:
    return Path.home().joinpath(".config")


def _symlinkmirror_dir() -> Path:
    return _user_config_dir().joinpath("symlinkmirror")


def _conf_path() -> Path:
    return _symlinkmirror_dir().joinpath("symlinkmirror.json")


@dataclass
class Config:
    """symlinkmirror runtime config object"""

    __slots__ = (
        "copy_attributes",
        "detect_cycles",
        "allow_unprivileged",
        "log_level",
    )

    copy_attributes: bool
    detect_cycles: bool
    allow_unprivileged: bool
    log_level: str

    __annotations__ = {
        "copy_attributes": bool,
        "detect_cycles": bool,
        "allow_unprivileged": bool,
        "log_level": str,
    }

    def _overrides(self, conf: dict) -> None:
        """apply overrides from conf"""

        for flag in ("copy_attributes", "detect_cycles", "allow_unprivileged"):
            _value = conf.get(flag)
            if _value is not None:
                setattr(self, flag, bool(_value))

        _log_level = conf.get("log_level")
        if _log_level is not None:
            setattr(self, "log_level", str(_log_level).upper())

    def __init__(self, load: bool = True) -> None:
        self.copy_attributes = False
        self.detect_cycles = True
        self.allow_unprivileged = True
        self.log_level = "WARNING"

        if load:
            conf_path = _conf_path()
            if conf_path.exists():
                with conf_path.open("r") as f:
                    conf = json.load(f)
                self._overrides(conf=conf)

    @staticmethod
    def conf_path() -> Path:
        """Returns the path of the config file"""
        return _conf_path()

    def __repr__(self) -> str:
        attributes = [k for k in self.__slots__]
        width = max([len(i) for i in attributes])
        s = f"Config: {str(_conf_path())}\n"
        s += "-" * len(s) + "\n"
        for k in attributes:
            v = self.__getattribute__(k)
            space = " " * (width - len(str(k)) + 2)
            s += f"  {k}{space}{str(v)}\n"
        return s
