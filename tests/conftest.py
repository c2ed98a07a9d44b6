from __future__ import annotations

import http.client
import json
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Dict, Iterator, List, Sequence, Tuple
from urllib.parse import urlsplit

import pytest
import requests
import requests.adapters
from loguru import logger
from requests.cookies import extract_cookies_to_jar
from requests.structures import CaseInsensitiveDict
from typer.testing import CliRunner

HEADER = (
    "Workout Timestamp,Live/On-Demand,Instructor Name,Length (minutes),Fitness Discipline,"
    "Type,Title,Class Timestamp,Total Output,Avg. Watts,Avg. Resistance,Avg. Cadence (RPM),"
    "Avg. Speed (mph),Distance (mi),Calories Burned,Avg. Heartrate,Avg. Incline,Avg. Pace (min/mi)"
)


@pytest.fixture(autouse=True)
def _silence_logger(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    logger.remove()
    monkeypatch.setattr("peloton_cli.__main__.setup_logger", lambda level: None)
    yield


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def sample_csv() -> bytes:
    return (
        HEADER
        + "\n2020-01-01,true,Jane Doe,1800,Cycling,Class,Title,2020-01-01,150,200,50%,90,20mph,5mi,300,140,,"
        + "\n,,,,,,,,,,,,,,,,,"
        + "\n"
    ).encode("utf-8")


@pytest.fixture()
def multi_row_csv() -> bytes:
    rows = [
        HEADER,
        "2021-03-01 07:00 (EST),On Demand,Alex Toussaint,1200,Cycling,Music,20 min Pop Ride,"
        "2021-02-27 08:00 (EST),210,175,48%,82,19.5,6.5,240,151,,",
        "2021-03-02 07:30 (EST),Live,Becs Gentry,1800,Running,Intervals,30 min HIIT Run,"
        "2021-03-02 07:30 (EST),,,,,6.1,3.05,320,160,1.5,9:50",
        "2021-03-03 18:00 (EST),On Demand,Adrian Williams,600,Strength,Core,10 min Core,"
        "2021-01-10 10:00 (EST),,,,,,,45,,,",
        "",
    ]
    return "\n".join(rows).encode("utf-8")


@pytest.fixture()
def profile_payload() -> Dict[str, Any]:
    return {
        "id": "user-123",
        "username": "rider",
        "email": "rider@example.com",
        "first_name": "Pat",
        "last_name": "Rider",
        "cycling_ftp": 220,
        "total_workouts": 412,
        "weight": 72.5,
        "paired_devices": [{"name": "Chest strap", "paired_device_type": "heart_rate_monitor", "serial_number": "A1"}],
        "workout_counts": [{"name": "Cycling", "slug": "cycling", "count": 300, "icon_url": "https://x/i.png"}],
        "quick_hits": {"quick_hits_enabled": True, "speed_shortcuts": "1,2,3"},
        "member_groups": ["beta"],
        "facebook_id": None,
        "some_future_field": {"nested": True},
    }


@pytest.fixture()
def write_temp_toml(tmp_path: Path):
    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.write_text(content.strip() + "\n")
        return path

    return _write


class FakeAdapter(requests.adapters.BaseAdapter):
    """Transport stand-in: records prepared requests and replays canned responses."""

    def __init__(self) -> None:
        super().__init__()
        self.requests: List[requests.PreparedRequest] = []
        self.routes: Dict[Tuple[str, str], Any] = {}

    def add(
        self,
        method: str,
        path: str,
        status: int = 200,
        body: Any = b"",
        set_cookies: Sequence[str] = (),
        content_type: str = "application/json",
    ) -> None:
        self.routes[(method, path)] = (status, body, tuple(set_cookies), content_type)

    def add_error(self, method: str, path: str, exc: Exception) -> None:
        self.routes[(method, path)] = exc

    def send(self, request: requests.PreparedRequest, **kwargs: Any) -> requests.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, urlsplit(request.url).path))
        if route is None:
            route = (404, b'{"message": "not found"}', (), "application/json")
        if isinstance(route, Exception):
            raise route

        status, body, set_cookies, content_type = route
        if not isinstance(body, bytes):
            body = json.dumps(body).encode("utf-8")

        msg = http.client.HTTPMessage()
        for cookie in set_cookies:
            msg["Set-Cookie"] = cookie

        response = requests.Response()
        response.status_code = status
        response.reason = "OK" if status < 400 else "Error"
        response._content = body
        response.headers = CaseInsensitiveDict({"Content-Type": content_type})
        response.encoding = "utf-8"
        response.url = request.url
        response.request = request
        response.raw = SimpleNamespace(_original_response=SimpleNamespace(msg=msg))
        extract_cookies_to_jar(response.cookies, request, response.raw)
        return response

    def close(self) -> None:
        return None


@pytest.fixture()
def fake_adapter() -> FakeAdapter:
    return FakeAdapter()
