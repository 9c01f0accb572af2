from __future__ import annotations
import os
from pathlib import Path
from typing import Optional

from PySide6.QtCore import QSettings

from ..models import Granularity, ImportOptions, ProjectionOptions
from .paths import get_default_log_directory, get_default_settings_path


class SettingsManager:
    """User defaults for importing and projecting, stored through QSettings.

    With ``path`` set (or by default) the settings live in an INI file, which
    works without a running Qt application.
    """

    def __init__(
        self,
        path: Optional[os.PathLike | str] = None,
        *,
        organization: Optional[str] = None,
        application: str = "DataCurve",
    ):
        if organization is not None:
            self.settings = QSettings(organization, application)
        else:
            target = Path(path) if path else get_default_settings_path()
            target.parent.mkdir(parents=True, exist_ok=True)
            self.settings = QSettings(str(target), QSettings.Format.IniFormat)

    def sync(self) -> None:
        self.settings.sync()

    # --- Projection --------------------------------------------------------
    def get_granularity(self) -> Granularity:
        value = self.settings.value("projection/granularity", Granularity.HOUR.value)
        try:
            return Granularity.parse(str(value or ""))
        except ValueError:
            return Granularity.HOUR

    def set_granularity(self, granularity: Granularity | str) -> None:
        self.settings.setValue("projection/granularity", Granularity.parse(granularity).value)

    def get_overlap(self) -> bool:
        return bool(self.settings.value("projection/overlap", False, type=bool))

    def set_overlap(self, enabled: bool) -> None:
        self.settings.setValue("projection/overlap", bool(enabled))

    def get_axis_scale(self) -> float:
        value = self.settings.value("projection/axis_scale", 1.0)
        try:
            scale = float(value)
        except (TypeError, ValueError):
            return 1.0
        return scale if scale > 0 else 1.0

    def set_axis_scale(self, scale: float) -> None:
        value = float(scale)
        if value <= 0:
            raise ValueError(f"axis scale must be a positive number, got {scale!r}")
        self.settings.setValue("projection/axis_scale", value)

    # --- Import ------------------------------------------------------------
    def get_csv_encoding(self) -> Optional[str]:
        value = self.settings.value("import/csv_encoding", "")
        return str(value) if value else None

    def set_csv_encoding(self, encoding: Optional[str]) -> None:
        self.settings.setValue("import/csv_encoding", encoding or "")

    def get_assume_dayfirst(self) -> bool:
        return bool(self.settings.value("import/assume_dayfirst", False, type=bool))

    def set_assume_dayfirst(self, dayfirst: bool) -> None:
        self.settings.setValue("import/assume_dayfirst", bool(dayfirst))

    # --- Logging -----------------------------------------------------------
    def get_log_directory(self) -> Path:
        path_str = self.settings.value("log_dir", "")
        if path_str:
            return Path(str(path_str))
        return self.default_log_directory()

    def set_log_directory(self, path: Optional[os.PathLike | str]) -> None:
        self.settings.setValue("log_dir", str(path) if path else "")

    def default_log_directory(self) -> Path:
        return get_default_log_directory()

    # ----------------------------------------------------------------------
    def import_options(self, source_label: Optional[str] = None) -> ImportOptions:
        return ImportOptions(
            source_label=source_label,
            assume_dayfirst=self.get_assume_dayfirst(),
            csv_encoding=self.get_csv_encoding(),
        )

    def projection_options(self) -> ProjectionOptions:
        return ProjectionOptions(
            granularity=self.get_granularity(),
            overlap=self.get_overlap(),
            axis_scale=self.get_axis_scale(),
        )


__all__ = ["SettingsManager"]
