"""Regex-based PII preprocessing for conversation turns.

Processing flow for one preprocess call:
1. Bypass when preprocessing or PII detection is disabled.
2. Lock the session's anonymization map for the whole call.
3. For each enabled category, in configured order, scan the *current* text
   (later categories see earlier replacements).
4. Reuse the session token for a value seen before, otherwise allocate the
   next sequence number and redact.
5. Rebuild the text once per category from the disjoint match spans.

Postprocessing swaps recorded tokens back in a single regex pass.
"""

from __future__ import annotations

import re

from app.logging.logger import Log
from app.preprocessing.base import BaseConversationPreprocessor
from app.preprocessing.models import (
    PiiCategory,
    PiiDetection,
    PreprocessingResult,
    RedactionMode,
)
from app.preprocessing.patterns import PatternRegistry
from app.preprocessing.redaction import MASK_CHAR, redact
from app.preprocessing.session_store import (
    SessionAnonymizationMap,
    SessionAnonymizationStore,
)

_MASK = re.escape(MASK_CHAR)
# A whole run of mask characters, never a slice of a longer run.
_MASK_RUN = f"(?<!{_MASK}){_MASK}+(?!{_MASK})"


class ConversationPreprocessor(BaseConversationPreprocessor):
    """Default preprocessor: pattern detection with per-session token maps."""

    def __init__(
        self,
        *,
        registry: PatternRegistry,
        store: SessionAnonymizationStore | None = None,
        redaction_mode: RedactionMode = RedactionMode.ANONYMIZE,
        enabled: bool = True,
        log_original_text: bool = False,
        log_processed_text: bool = True,
        log_detections: bool = False,
    ) -> None:
        self._registry = registry
        self._store = store if store is not None else SessionAnonymizationStore()
        self._mode = redaction_mode
        self._enabled = enabled
        self._log_original_text = log_original_text
        self._log_processed_text = log_processed_text
        self._log_detections = log_detections

    @property
    def store(self) -> SessionAnonymizationStore:
        return self._store

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def preprocess(self, text: str, session_id: str) -> PreprocessingResult:
        """Replace PII in *text* with session-stable replacements."""
        if not self._enabled:
            if self._log_processed_text:
                Log.info("Preprocessing disabled, returning original text", session_id=session_id)
            return PreprocessingResult(original_text=text, processed_text=text)

        if self._log_original_text:
            Log.debug(f"Original text: {text}", session_id=session_id)

        result = PreprocessingResult(original_text=text, processed_text=text)
        session = self._store.get_or_create(session_id)

        with session.lock:
            for category in self._registry:
                try:
                    self._redact_category(result, category, session)
                except Exception as exc:
                    Log.error(
                        f"PII detection failed for category '{category.name}': {exc}",
                        session_id=session_id,
                    )

        if self._log_detections:
            for d in result.detections:
                Log.info(
                    f"Detected {d.category} -> {d.replacement_value!r}"
                    f" at {d.start} (len {d.length})",
                    session_id=session_id,
                )
        if self._log_processed_text:
            Log.info(f"Preprocessed text: {result.processed_text}", session_id=session_id)

        return result

    def postprocess(self, text: str, session_id: str) -> str:
        """Swap anonymization tokens in *text* back to the original values.

        Unknown sessions pass through unchanged. Tokens that do not identify
        a single original value (empty REMOVE replacements, shared MASK
        strings) are left in place. Mask strings only match as a complete
        run of mask characters.
        """
        session = self._store.get(session_id)
        if session is None or not text:
            return text

        reverse = self._reversible_tokens(session.snapshot())
        if not reverse:
            return text

        literal = [token for token in reverse if token.strip(MASK_CHAR)]
        # Longest first so a token is never consumed by a shorter prefix.
        alternatives = [
            re.escape(token) for token in sorted(literal, key=len, reverse=True)
        ]
        if len(literal) < len(reverse):
            alternatives.append(_MASK_RUN)
        restored = re.sub(
            "|".join(alternatives),
            lambda m: reverse.get(m.group(0), m.group(0)),
            text,
        )

        if self._log_processed_text:
            Log.info("Postprocessed model reply", session_id=session_id)
        return restored

    def end_session(self, session_id: str) -> bool:
        return self._store.evict(session_id)

    # ------------------------------------------------------------------
    # Detection
    # ------------------------------------------------------------------

    def _redact_category(
        self,
        result: PreprocessingResult,
        category: PiiCategory,
        session: SessionAnonymizationMap,
    ) -> None:
        text = result.processed_text
        matches = [m for m in category.pattern.finditer(text) if m.end() > m.start()]
        if not matches:
            return

        parts: list[str] = []
        detections: list[PiiDetection] = []
        added: dict[str, str] = {}
        cursor = 0

        for match in matches:
            original_value = match.group(0)
            replacement = session.lookup(original_value)
            if replacement is None:
                sequence = session.next_sequence(category.name)
                replacement = redact(self._mode, original_value, category.name, sequence)
                session.record(original_value, replacement)
                added[original_value] = replacement

            parts.append(text[cursor:match.start()])
            parts.append(replacement)
            cursor = match.end()

            detections.append(
                PiiDetection(
                    category=category.name,
                    original_value=original_value,
                    replacement_value=replacement,
                    start=match.start(),
                    length=len(original_value),
                )
            )

        parts.append(text[cursor:])

        result.processed_text = "".join(parts)
        result.detections.extend(detections)
        result.anonymization_map.update(added)
        result.was_modified = True

    @staticmethod
    def _reversible_tokens(mapping: dict[str, str]) -> dict[str, str]:
        """Invert original -> token, keeping only unambiguous tokens."""
        owners: dict[str, list[str]] = {}
        for original_value, token in mapping.items():
            if token and token != original_value:
                owners.setdefault(token, []).append(original_value)
        return {token: values[0] for token, values in owners.items() if len(values) == 1}
