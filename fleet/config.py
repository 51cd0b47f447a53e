"""Runtime settings: flag thresholds, reporting timezone, alert window."""

import logging
import os
from dataclasses import dataclass, field, replace
from datetime import tzinfo
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from dateutil import tz

from .flagging import FlagThresholds

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "Asia/Muscat"


@dataclass(frozen=True)
class Settings:
    """Business configuration for flagging, reporting and alerting."""

    thresholds: FlagThresholds = field(default_factory=FlagThresholds)
    reporting_timezone: str = DEFAULT_TIMEZONE
    alert_lookahead_days: int = 7
    alert_limit: int = 6
    availability_period_hours: float = 240
    auto_approve_unflagged: bool = False
    assistant_url: Optional[str] = None

    @property
    def tz(self) -> tzinfo:
        """Resolved reporting timezone."""
        return resolve_timezone(self.reporting_timezone)


def resolve_timezone(name: str) -> tzinfo:
    """Look up a timezone by IANA name. Raises ValueError if unknown."""
    zone = tz.gettz(name)
    if zone is None:
        raise ValueError(f"Unknown timezone: {name}")
    return zone


def settings_from_dict(dct: Optional[Dict[str, Any]]) -> Settings:
    """Build Settings from the camelCase `settings:` section of a dataset file."""
    dct = dct or {}
    limits = dct.get("thresholds") or {}
    defaults = FlagThresholds()
    thresholds = FlagThresholds(
        max_tank_capacity_l=limits.get("maxTankCapacityL", defaults.max_tank_capacity_l),
        odo_delta_high_km=limits.get("odoDeltaHighKm", defaults.odo_delta_high_km),
        ocr_confidence_min=limits.get("ocrConfidenceMin", defaults.ocr_confidence_min),
    )
    base = Settings()
    settings = Settings(
        thresholds=thresholds,
        reporting_timezone=dct.get("reportingTimezone", base.reporting_timezone),
        alert_lookahead_days=dct.get("alertLookaheadDays", base.alert_lookahead_days),
        alert_limit=dct.get("alertLimit", base.alert_limit),
        availability_period_hours=dct.get(
            "availabilityPeriodHours", base.availability_period_hours
        ),
        auto_approve_unflagged=dct.get(
            "autoApproveUnflagged", base.auto_approve_unflagged
        ),
        assistant_url=dct.get("assistantUrl", base.assistant_url),
    )
    # Fail early on a bad zone name rather than at report time
    resolve_timezone(settings.reporting_timezone)
    return settings


def settings_to_dict(settings: Settings) -> Dict[str, Any]:
    """Serialize Settings to the YAML dict format (camelCase keys)."""
    d: Dict[str, Any] = {
        "thresholds": {
            "maxTankCapacityL": settings.thresholds.max_tank_capacity_l,
            "odoDeltaHighKm": settings.thresholds.odo_delta_high_km,
            "ocrConfidenceMin": settings.thresholds.ocr_confidence_min,
        },
        "reportingTimezone": settings.reporting_timezone,
        "alertLookaheadDays": settings.alert_lookahead_days,
        "alertLimit": settings.alert_limit,
        "availabilityPeriodHours": settings.availability_period_hours,
        "autoApproveUnflagged": settings.auto_approve_unflagged,
    }
    if settings.assistant_url is not None:
        d["assistantUrl"] = settings.assistant_url
    return d


def apply_env(settings: Settings, environ=None) -> Settings:
    """Apply FLEET_ASSISTANT_URL / FLEET_TIMEZONE overrides."""
    environ = os.environ if environ is None else environ
    changes = {}
    if environ.get("FLEET_ASSISTANT_URL"):
        changes["assistant_url"] = environ["FLEET_ASSISTANT_URL"]
    if environ.get("FLEET_TIMEZONE"):
        resolve_timezone(environ["FLEET_TIMEZONE"])
        changes["reporting_timezone"] = environ["FLEET_TIMEZONE"]
    if changes:
        logger.debug("Settings overridden from environment: %s", sorted(changes))
        return replace(settings, **changes)
    return settings


def load_settings(filename: Union[str, Path, None] = None, environ=None) -> Settings:
    """Load settings from a dataset YAML file (if given), then apply env overrides."""
    settings = Settings()
    if filename is not None:
        with open(filename, "r") as fp:
            data = yaml.load(fp, Loader=yaml.SafeLoader) or {}
        settings = settings_from_dict(data.get("settings"))
    return apply_env(settings, environ)
