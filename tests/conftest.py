from collections.abc import Callable

import pytest

from app.config.settings import DEFAULT_PII_PATTERNS
from app.preprocessing.models import RedactionMode
from app.preprocessing.patterns import PatternRegistry
from app.preprocessing.preprocessor import ConversationPreprocessor
from app.preprocessing.session_store import SessionAnonymizationStore


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def _build_preprocessor(
    *categories: str,
    mode: RedactionMode = RedactionMode.ANONYMIZE,
    enabled: bool = True,
    store: SessionAnonymizationStore | None = None,
) -> ConversationPreprocessor:
    registry = PatternRegistry.from_config(
        list(categories or ("phone", "email")),
        DEFAULT_PII_PATTERNS,
    )
    return ConversationPreprocessor(
        registry=registry,
        store=store,
        redaction_mode=mode,
        enabled=enabled,
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def make_preprocessor() -> Callable[..., ConversationPreprocessor]:
    """Build a preprocessor over the default rules for the given categories."""
    return _build_preprocessor


@pytest.fixture()
def preprocessor() -> ConversationPreprocessor:
    """Phone + email detection in ANONYMIZE mode."""
    return _build_preprocessor("phone", "email")
