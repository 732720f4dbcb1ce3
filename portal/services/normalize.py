"""
normalize.py - Response shape helpers
Single responsibility: turn backend bodies into plain record lists.
"""
from typing import Any, Iterable


def normalize_list(body: Any) -> list:
    """
    Extract the record list from a response body.

    A bare list is returned as-is; a mapping whose ``data`` is a list yields
    that list; anything else yields an empty list. Never raises.
    """
    if isinstance(body, list):
        return body
    if isinstance(body, dict):
        data = body.get("data")
        if isinstance(data, list):
            return data
    return []


def flatten_profile(record: dict, profile_key: str, fields: Iterable[str]) -> dict:
    """Copy nested role-profile fields (e.g. user.teacher.department) to the top level."""
    if not isinstance(record, dict):
        return record
    profile = record.get(profile_key) or {}
    if not isinstance(profile, dict):
        profile = {}
    flat = dict(record)
    for name in fields:
        flat[name] = profile.get(name) or record.get(name)
    return flat


def unique_values(records: Iterable[dict], key: str) -> list:
    """Sorted distinct truthy values of ``key`` (filter dropdown options)."""
    seen = {r.get(key) for r in records if isinstance(r, dict) and r.get(key)}
    return sorted(seen, key=str)
