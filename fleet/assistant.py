"""
Client for the external generative-text service.

Two flows are used: anomaly detection over fleet data and a report
summary for a date range. The service owns the prompts; this module only
serializes the input, checks the shape of the reply and turns any failure
into ExternalServiceFailure. get_anomaly_alert / get_report_summary are the
call boundary for the presentation layer and never raise.
"""

import json
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Optional

import requests

from .errors import ExternalServiceFailure

logger = logging.getLogger(__name__)

ANOMALY_FLOW = "dashboardAnomalyDetectionFlow"
SUMMARY_FLOW = "reportSummaryFlow"

ANOMALY_FAILED = "Failed to analyze data."
SUMMARY_FAILED = "Failed to generate summary."

REQUEST_TIMEOUT = 60


class AssistantClient:
    """Posts flow input as JSON to `<base_url>/<flow>` and returns the JSON reply."""

    def __init__(self, base_url: str, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()

    def run_flow(self, flow: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.base_url}/{flow}"
        try:
            response = self.session.post(url, json=payload, timeout=REQUEST_TIMEOUT)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            raise ExternalServiceFailure(f"{flow} request failed: {e}") from e
        except ValueError as e:
            raise ExternalServiceFailure(f"{flow} returned invalid JSON") from e
        if not isinstance(data, dict):
            raise ExternalServiceFailure(f"{flow} returned {type(data).__name__}, expected object")
        return data


def _string_field(data: Dict[str, Any], key: str, flow: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise ExternalServiceFailure(f"{flow} reply is missing string field '{key}'")
    return value


def detect_anomalies(client: AssistantClient, fleet_data: Any) -> str:
    """Send fleet data for analysis and return the alert message."""
    payload = {"fleetData": json.dumps(fleet_data)}
    data = client.run_flow(ANOMALY_FLOW, payload)
    return _string_field(data, "alertMessage", ANOMALY_FLOW)


def summarize_report(
    client: AssistantClient,
    start_date: date,
    end_date: date,
    performance_data: Any,
) -> str:
    """Ask for a short summary of fleet performance between two dates."""
    payload = {
        "startDate": start_date.isoformat(),
        "endDate": end_date.isoformat(),
        "fleetPerformanceData": json.dumps(performance_data),
    }
    data = client.run_flow(SUMMARY_FLOW, payload)
    return _string_field(data, "summary", SUMMARY_FLOW)


@dataclass(frozen=True)
class AnalysisResult:
    success: bool
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"success": self.success, "message": self.message}


def get_anomaly_alert(client: AssistantClient, fleet_data: Any) -> AnalysisResult:
    try:
        return AnalysisResult(True, detect_anomalies(client, fleet_data))
    except ExternalServiceFailure as e:
        logger.error("Anomaly detection failed: %s", e)
        return AnalysisResult(False, ANOMALY_FAILED)


def get_report_summary(
    client: AssistantClient,
    start_date: date,
    end_date: date,
    performance_data: Any,
) -> AnalysisResult:
    try:
        return AnalysisResult(
            True, summarize_report(client, start_date, end_date, performance_data)
        )
    except ExternalServiceFailure as e:
        logger.error("Report summary failed: %s", e)
        return AnalysisResult(False, SUMMARY_FAILED)
