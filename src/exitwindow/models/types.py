from enum import Enum


class HousingStatus(str, Enum):
    ALIGNED = "aligned"
    NOTICE_REQUIRED = "notice-required"
    LOCKED_IN = "locked-in"
    UNKNOWN = "unknown"


class IncomeStability(str, Enum):
    STABLE = "stable"
    UNSTABLE = "unstable"
    UNKNOWN = "unknown"


class RunwayStatus(str, Enum):
    SECURE = "secure"
    TIGHT = "tight"
    UNKNOWN = "unknown"


class DependentsCoverage(str, Enum):
    SUPPORTED = "supported"
    UNSUPPORTED = "unsupported"
    UNKNOWN = "unknown"


class HealthcareContinuity(str, Enum):
    SECURED = "secured"
    AT_RISK = "at-risk"
    UNKNOWN = "unknown"


class LegalBlocker(str, Enum):
    PRESENT = "present"
    CLEAR = "clear"
    UNKNOWN = "unknown"


class Ternary(str, Enum):
    YES = "yes"
    NO = "no"
    UNKNOWN = "unknown"


class ExitStatus(str, Enum):
    READY = "ready"
    NOT_YET = "not-yet"


class RiskBoundaryCategory(str, Enum):
    ABORT = "abort"
    FORCED_MOVE = "forced-move"
    REASSESS = "reassess"


class ChangeKind(str, Enum):
    CONSTRAINT_CHANGED = "constraint-changed"
    BLOCKER_RESOLVED = "blocker-resolved"
    BLOCKER_INTRODUCED = "blocker-introduced"


class NoteContext(str, Enum):
    CONSTRAINT = "constraint"
    SNAPSHOT = "snapshot"
    BLOCKER = "blocker"


class FocusStatus(str, Enum):
    STABLE = "stable"
    WATCH = "watch"
    DEGRADING = "degrading"
