import pytest

from app.config.settings import DEFAULT_PII_PATTERNS
from app.preprocessing.exceptions import PatternCompilationError, PreprocessingError
from app.preprocessing.patterns import PatternRegistry, compile_category


class TestCompileCategory:
    def test_compiles_case_insensitive(self) -> None:
        category = compile_category("name", r"john")
        assert category.pattern.search("Call JOHN now") is not None

    def test_invalid_regex_raises(self) -> None:
        with pytest.raises(PatternCompilationError, match="Invalid pattern"):
            compile_category("broken", r"([")

    def test_empty_matching_regex_raises(self) -> None:
        with pytest.raises(PatternCompilationError, match="empty string"):
            compile_category("greedy", r"a*")

    def test_error_is_preprocessing_error(self) -> None:
        assert issubclass(PatternCompilationError, PreprocessingError)


class TestFromConfig:
    def test_keeps_configured_order(self) -> None:
        registry = PatternRegistry.from_config(["email", "phone"], DEFAULT_PII_PATTERNS)
        assert [c.name for c in registry] == ["email", "phone"]

    def test_get_returns_category(self) -> None:
        registry = PatternRegistry.from_config(["phone"], DEFAULT_PII_PATTERNS)
        category = registry.get("phone")
        assert category is not None
        assert category.name == "phone"

    def test_get_unknown_returns_none(self) -> None:
        registry = PatternRegistry.from_config(["phone"], DEFAULT_PII_PATTERNS)
        assert registry.get("email") is None

    def test_category_without_pattern_is_skipped(self) -> None:
        registry = PatternRegistry.from_config(["phone", "passport"], DEFAULT_PII_PATTERNS)
        assert registry.names == ["phone"]
        assert "passport" not in registry
        assert registry.rejected == {}

    def test_blank_pattern_is_skipped(self) -> None:
        registry = PatternRegistry.from_config(["blank"], {"blank": "   "})
        assert len(registry) == 0

    def test_unlisted_pattern_is_not_loaded(self) -> None:
        registry = PatternRegistry.from_config(["email"], DEFAULT_PII_PATTERNS)
        assert "phone" not in registry

    def test_duplicate_names_loaded_once(self) -> None:
        registry = PatternRegistry.from_config(["phone", "phone"], DEFAULT_PII_PATTERNS)
        assert registry.names == ["phone"]

    def test_invalid_pattern_isolated(self) -> None:
        patterns = {"broken": r"([", "email": DEFAULT_PII_PATTERNS["email"]}
        registry = PatternRegistry.from_config(["broken", "email"], patterns)
        assert registry.names == ["email"]
        assert "broken" in registry.rejected

    def test_empty_matching_pattern_rejected(self) -> None:
        registry = PatternRegistry.from_config(["greedy"], {"greedy": r"\d*"})
        assert len(registry) == 0
        assert "greedy" in registry.rejected

    def test_rejected_is_a_copy(self) -> None:
        registry = PatternRegistry.from_config(["broken"], {"broken": r"(["})
        registry.rejected.clear()
        assert "broken" in registry.rejected

    def test_empty_config(self) -> None:
        registry = PatternRegistry.from_config([], {})
        assert list(registry) == []


class TestDefaultPatterns:
    @pytest.mark.parametrize(
        "value",
        ["555-123-4567", "(555) 123-4567", "555.123.4567", "+1 555 123 4567", "5551234567"],
    )
    def test_phone_matches(self, value: str) -> None:
        category = compile_category("phone", DEFAULT_PII_PATTERNS["phone"])
        match = category.pattern.search(f"call {value} today")
        assert match is not None
        assert match.group(0) == value

    @pytest.mark.parametrize("value", ["a@b.com", "first.last@sub.domain.co.uk", "user+tag@example.com"])
    def test_email_matches(self, value: str) -> None:
        category = compile_category("email", DEFAULT_PII_PATTERNS["email"])
        match = category.pattern.search(f"mail {value} please")
        assert match is not None
        assert match.group(0) == value

    def test_ssn_matches(self) -> None:
        category = compile_category("ssn", DEFAULT_PII_PATTERNS["ssn"])
        match = category.pattern.search("my ssn is 123-45-6789.")
        assert match is not None
        assert match.group(0) == "123-45-6789"

    def test_phone_ignores_ssn(self) -> None:
        category = compile_category("phone", DEFAULT_PII_PATTERNS["phone"])
        assert category.pattern.search("my ssn is 123-45-6789") is None

    @pytest.mark.parametrize("value", ["4111 1111 1111 1111", "4111-1111-1111-1111", "4111111111111111"])
    def test_creditcard_matches(self, value: str) -> None:
        category = compile_category("creditcard", DEFAULT_PII_PATTERNS["creditcard"])
        match = category.pattern.search(f"card {value} expires")
        assert match is not None
        assert match.group(0) == value
