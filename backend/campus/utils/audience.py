"""Announcement audience rules.

An announcement reaches a reader when it is global, or when its role
targets the reader and, if a filter is set, the reader's profile
matches the filter. The filter is a mapping of profile field name to
the list of accepted values; a reader qualifies when ANY listed field
matches.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

STAFF_ROLE = "STAFF"


def matches_filter(announcement_filter: Optional[Mapping[str, Any]], profile: Mapping[str, Any]) -> bool:
    """Return True if some `field -> values` entry contains the profile's value.

    Entries whose value is not a list never match.
    """
    for key, values in (announcement_filter or {}).items():
        if not isinstance(values, list):
            continue
        if profile.get(key) in values:
            return True
    return False


def is_visible_to_staff(announcement, caller_id: str, profile: Mapping[str, Any]) -> bool:
    """Decide whether the staff member `caller_id` sees `announcement`."""
    if announcement.is_global:
        return True
    addressed = announcement.role == STAFF_ROLE or announcement.issuer == caller_id
    if not announcement.filter:
        return addressed
    return addressed and matches_filter(announcement.filter, profile)


def is_recipient(announcement, role: str, profile: Optional[Mapping[str, Any]]) -> bool:
    """Decide whether an account with `role` and `profile` gets notified."""
    if announcement.is_global:
        return True
    if role != announcement.role:
        return False
    if not announcement.filter:
        return True
    return profile is not None and matches_filter(announcement.filter, profile)
