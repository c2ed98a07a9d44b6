"""Data models for Peloton API payloads and normalized workouts."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar

T = TypeVar("T")


def _known_values(cls: Type[Any], data: Mapping[str, Any]) -> Dict[str, Any]:
    """Keep keys that name a field of ``cls`` and are not null."""
    names = {item.name for item in fields(cls)}
    return {key: value for key, value in data.items() if key in names and value is not None}


def _flat(cls: Type[T], data: Any) -> T:
    if not isinstance(data, Mapping):
        return cls()
    return cls(**_known_values(cls, data))


def _flat_list(cls: Type[T], items: Any) -> List[T]:
    if not isinstance(items, list):
        return []
    return [_flat(cls, item) for item in items if isinstance(item, Mapping)]


@dataclass(frozen=True)
class ErrorResponse:
    """Error body returned by the API on failed requests."""

    status: int = 0
    error_code: int = 0
    subcode: int = 0
    message: str = ""
    details: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "ErrorResponse":
        return _flat(cls, data)


@dataclass(frozen=True)
class PairedDevice:
    name: str = ""
    paired_device_type: str = ""
    serial_number: str = ""


@dataclass(frozen=True)
class WorkoutCount:
    name: str = ""
    slug: str = ""
    count: int = 0
    icon_url: str = ""


@dataclass(frozen=True)
class ContractAgreement:
    contract_type: str = ""
    contract_id: str = ""
    contract_created_at: int = 0
    bike_contract_url: str = ""
    tread_contract_url: str = ""
    agreed_at: int = 0
    contract_display_name: str = ""


@dataclass(frozen=True)
class ExternalMusicAuth:
    provider: str = ""
    status: str = ""
    email: str = ""


@dataclass(frozen=True)
class QuickHits:
    quick_hits_enabled: bool = False
    speed_shortcuts: str = ""
    incline_shortcuts: str = ""


@dataclass(frozen=True)
class UserProfile:
    """Decoded ``/api/me`` payload.

    Every attribute is optional upstream, so absent or null keys fall back
    to the field default and unknown keys are dropped.
    """

    id: str = ""
    username: str = ""
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    middle_initial: str = ""
    name: str = ""
    gender: str = ""
    location: str = ""
    image_url: str = ""
    created_country: str = ""
    phone_number: str = ""
    obfuscated_email: str = ""
    instructor_id: str = ""
    facebook_id: str = ""
    facebook_access_token: str = ""
    referral_code: str = ""
    cycling_ftp_source: str = ""
    cycling_ftp_workout_id: str = ""
    hardware_settings: str = ""
    weight: float = 0.0
    height: float = 0.0
    birthday: int = 0
    created_at: int = 0
    last_workout_at: int = 0
    cycling_ftp: int = 0
    cycling_workout_ftp: int = 0
    estimated_cycling_ftp: int = 0
    default_max_heart_rate: int = 0
    customized_max_heart_rate: int = 0
    total_workouts: int = 0
    total_followers: int = 0
    total_following: int = 0
    total_pending_followers: int = 0
    total_pedaling_metric_workouts: int = 0
    total_non_pedaling_metric_workouts: int = 0
    referrals_made: int = 0
    v1_referrals_made: int = 0
    subscription_credits: int = 0
    subscription_credits_used: int = 0
    has_active_digital_subscription: bool = False
    has_active_device_subscription: bool = False
    is_internal_beta_tester: bool = False
    is_external_beta_tester: bool = False
    is_provisional: bool = False
    can_charge: bool = False
    is_strava_authenticated: bool = False
    is_fitbit_authenticated: bool = False
    block_explicit: bool = False
    is_demo: bool = False
    is_complete_profile: bool = False
    is_profile_private: bool = False
    has_signed_waiver: bool = False
    member_groups: List[str] = field(default_factory=list)
    default_heart_rate_zones: List[float] = field(default_factory=list)
    customized_heart_rate_zones: List[str] = field(default_factory=list)
    paired_devices: List[PairedDevice] = field(default_factory=list)
    workout_counts: List[WorkoutCount] = field(default_factory=list)
    contract_agreements: List[ContractAgreement] = field(default_factory=list)
    external_music_auth_list: List[ExternalMusicAuth] = field(default_factory=list)
    quick_hits: QuickHits = field(default_factory=QuickHits)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UserProfile":
        values = _known_values(cls, data)
        values["paired_devices"] = _flat_list(PairedDevice, data.get("paired_devices"))
        values["workout_counts"] = _flat_list(WorkoutCount, data.get("workout_counts"))
        values["contract_agreements"] = _flat_list(
            ContractAgreement, data.get("contract_agreements")
        )
        values["external_music_auth_list"] = _flat_list(
            ExternalMusicAuth, data.get("external_music_auth_list")
        )
        values["quick_hits"] = _flat(QuickHits, data.get("quick_hits"))
        for key in ("member_groups", "default_heart_rate_zones", "customized_heart_rate_zones"):
            if not isinstance(values.get(key), list):
                values.pop(key, None)
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class WorkoutRecord:
    """One row of the workout history export."""

    workout_timestamp: str = ""
    live: str = ""
    instructor_name: str = ""
    length: int = 0
    fitness_discipline: str = ""
    type: str = ""
    title: str = ""
    class_timestamp: str = ""
    total_output: int = 0
    avg_watts: int = 0
    avg_resistance: str = ""
    avg_cadence: int = 0
    avg_speed: str = ""
    distance: str = ""
    calories_burned: str = ""
    avg_heartrate: str = ""
    avg_incline: str = ""
    avg_pace: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "WorkoutRecord":
        return _flat(cls, data)
