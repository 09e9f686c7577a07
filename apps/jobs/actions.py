"""
Typed lifecycle actions.

A PATCH body is turned into exactly one of these objects by `parse_action`.
Everything past that point works with the typed object, so an unknown action
can only be reported here.
"""
import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from core.constants import DEFAULT_CANCEL_REASON
from .exceptions import InvalidAction, InvalidProof, MissingProof


@dataclass(frozen=True)
class StartProof:
    photo_reference: str
    gps_latitude: float
    gps_longitude: float


@dataclass(frozen=True)
class AcceptAction:
    name = 'ACCEPT'


@dataclass(frozen=True)
class StartAction:
    name = 'START'

    photo_reference: Any = None
    gps_latitude: Any = None
    gps_longitude: Any = None

    def validate_proof(self) -> StartProof:
        """
        Check the proof of work and return it with coordinates as floats.

        Presence is checked for all three fields before any range check, so a
        request missing one field reports MissingProof even if another field
        is also out of range.
        """
        missing = []
        if _is_blank(self.photo_reference):
            missing.append('photo')
        if _is_blank(self.gps_latitude):
            missing.append('latitude')
        if _is_blank(self.gps_longitude):
            missing.append('longitude')
        if missing:
            raise MissingProof(f"Proof of work required to start the job. Missing: {', '.join(missing)}.")

        if not isinstance(self.photo_reference, str):
            raise InvalidProof('Start proof photo must be a URL or file reference.')

        latitude = _coordinate(self.gps_latitude, 'latitude')
        longitude = _coordinate(self.gps_longitude, 'longitude')
        if not -90 <= latitude <= 90:
            raise InvalidProof('GPS latitude must be between -90 and 90.')
        if not -180 <= longitude <= 180:
            raise InvalidProof('GPS longitude must be between -180 and 180.')

        return StartProof(
            photo_reference=self.photo_reference.strip(),
            gps_latitude=latitude,
            gps_longitude=longitude,
        )


@dataclass(frozen=True)
class CompleteAction:
    name = 'COMPLETE'


@dataclass(frozen=True)
class CancelAction:
    name = 'CANCEL'

    reason: str = DEFAULT_CANCEL_REASON


def _is_blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def _coordinate(value, label):
    # bool is an int subclass, but True is not a coordinate
    if isinstance(value, bool):
        raise InvalidProof(f'GPS {label} must be a number.')
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        raise InvalidProof(f'GPS {label} must be a number.')
    if not math.isfinite(number):
        raise InvalidProof(f'GPS {label} must be a finite number.')
    return number


def parse_action(action: Optional[str], payload: Optional[Mapping[str, Any]] = None):
    """Build the typed action for a raw action name and its request fields."""
    payload = payload or {}

    if action == AcceptAction.name:
        return AcceptAction()
    if action == StartAction.name:
        return StartAction(
            photo_reference=payload.get('startProofPhoto'),
            gps_latitude=payload.get('startProofGpsLat'),
            gps_longitude=payload.get('startProofGpsLng'),
        )
    if action == CompleteAction.name:
        return CompleteAction()
    if action == CancelAction.name:
        reason = payload.get('reason')
        if not isinstance(reason, str) or not reason.strip():
            reason = DEFAULT_CANCEL_REASON
        return CancelAction(reason=reason.strip())

    raise InvalidAction(f"Invalid action '{action}'. Expected one of ACCEPT, START, COMPLETE, CANCEL.")
