"""Enumerations shared by models, schemas and the status policy.

Columns store the plain string values; these enums are what the code
compares against.
"""

from __future__ import annotations

from enum import Enum


class AssetType(str, Enum):
    TRIKE = "trike"
    SCOOTER = "scooter"


class AssetStatus(str, Enum):
    AVAILABLE = "available"
    IN_REPAIR = "in_repair"
    OUT_OF_SERVICE = "out_of_service"


class IssueType(str, Enum):
    DAMAGE = "damage"
    BREAKDOWN = "breakdown"
    BATTERY = "battery"
    TYRES = "tyres"
    BRAKES = "brakes"
    OTHER = "other"


class IssueSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class IssueStatus(str, Enum):
    REPORTED = "reported"
    ACKNOWLEDGED = "acknowledged"
    IN_REPAIR = "in_repair"
    RESOLVED = "resolved"


class Role(str, Enum):
    ADMIN = "admin"
    COURSE_USER = "course_user"


class InquiryType(str, Enum):
    QUOTE = "quote"
    LEASING = "leasing"
    DEMO = "demo"
    PARTNERSHIP = "partnership"
    SUPPORT = "support"
    GENERAL = "general"
