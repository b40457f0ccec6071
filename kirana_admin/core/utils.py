"""
Shared utility functions for the Kiranawala Admin Panel.
"""

import re
from datetime import datetime, date
from typing import Any, Optional

import numpy as np
import pandas as pd


def make_json_serializable(obj: Any) -> Any:
    """
    Recursively convert an object to be JSON serializable.
    Handles numpy types, pandas types, datetime objects and dataclasses.

    Args:
        obj: Any Python object

    Returns:
        JSON-serializable version of the object
    """
    if obj is None:
        return None

    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        return float(obj)
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    if isinstance(obj, np.bool_):
        return bool(obj)

    if isinstance(obj, pd.Timestamp):
        return obj.isoformat()
    if not isinstance(obj, (list, tuple, set, dict)):
        try:
            if pd.isna(obj):
                return None
        except (ValueError, TypeError):
            pass

    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, date):
        return obj.strftime('%Y-%m-%d')

    if hasattr(obj, "to_dict") and not isinstance(obj, type):
        return make_json_serializable(obj.to_dict())

    if isinstance(obj, dict):
        return {str(k): make_json_serializable(v) for k, v in obj.items()}

    if isinstance(obj, (list, tuple, set)):
        return [make_json_serializable(item) for item in obj]

    if isinstance(obj, (str, int, float, bool)):
        return obj

    return str(obj)


def format_currency(amount: Optional[float], symbol: str = "₹") -> str:
    """Format an amount as currency, e.g. ``₹1,234.50``."""
    value = float(amount or 0)
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.2f}"


def humanize_status(status: Optional[str]) -> str:
    """``out_for_delivery`` -> ``out for delivery``."""
    return (status or "").replace("_", " ")


# =============================================================================
# Phone numbers (India)
# =============================================================================

def format_phone_number(phone: str) -> str:
    """
    Format a phone number to E.164 (``+91XXXXXXXXXX``).

    Numbers that don't look Indian are returned unchanged.
    """
    if not phone:
        return ""

    cleaned = re.sub(r"\D", "", phone)

    if cleaned.startswith("91") and len(cleaned) == 12:
        return f"+{cleaned}"

    if len(cleaned) == 10:
        return f"+91{cleaned}"

    # Trunk prefix 0
    if len(cleaned) == 11 and cleaned.startswith("0"):
        return f"+91{cleaned[1:]}"

    return phone


def display_phone_number(phone: str) -> str:
    """Converts ``+919876543210`` to ``+91 98765 43210``."""
    if not phone:
        return ""

    cleaned = re.sub(r"[^\d+]", "", phone)

    if cleaned.startswith("+91") and len(cleaned) == 13:
        return f"{cleaned[:3]} {cleaned[3:8]} {cleaned[8:]}"

    return cleaned


def is_valid_indian_phone(phone: str) -> bool:
    """10 digits starting 6-9, optionally prefixed with 91."""
    cleaned = re.sub(r"\D", "", phone or "")

    if len(cleaned) == 10 and re.fullmatch(r"[6-9]\d{9}", cleaned):
        return True

    if len(cleaned) == 12 and re.fullmatch(r"91[6-9]\d{9}", cleaned):
        return True

    return False


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse a Supabase timestamp string into a naive local datetime."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        ts = value
    else:
        ts = pd.to_datetime(value, errors="coerce")
        if pd.isna(ts):
            return None
        ts = ts.to_pydatetime()
    if ts.tzinfo is not None:
        ts = ts.astimezone().replace(tzinfo=None)
    return ts
