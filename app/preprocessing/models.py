import re
from dataclasses import dataclass, field
from enum import Enum


class RedactionMode(str, Enum):
    """How a detected PII value is replaced in the processed text."""

    ANONYMIZE = "anonymize"  # labeled, numbered token, e.g. [PHONE_1]
    REMOVE = "remove"  # dropped from the text
    MASK = "mask"  # fixed-character mask, at most 8 chars


@dataclass(frozen=True)
class PiiCategory:
    """A named detection rule, compiled once at startup."""

    name: str  # e.g. "phone", "email", "ssn"
    pattern: re.Pattern[str]
    enabled: bool = True


@dataclass(frozen=True)
class PiiDetection:
    """Single match found while preprocessing."""

    category: str
    original_value: str
    replacement_value: str
    start: int  # offset in the text the category scanned
    length: int


@dataclass
class PreprocessingResult:
    """Output of one preprocess call. Not retained by the preprocessor."""

    original_text: str
    processed_text: str
    detections: list[PiiDetection] = field(default_factory=list)
    anonymization_map: dict[str, str] = field(default_factory=dict)
    was_modified: bool = False
