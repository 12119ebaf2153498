"""Tests for the validation engine."""

from dataclasses import dataclass, field
from typing import ClassVar

import pytest

from semattr.config import SemattrConfig, ValidationConfig
from semattr.engine import ValidationEngine
from semattr.errors import ConditionError
from semattr.model import SemanticRecord
from semattr.predicates import Predicate


@dataclass(frozen=True, kw_only=True)
class Counting(Predicate):
    """Predicate that records every value it checks."""
    kind: ClassVar[str] = "counting"

    result: bool = True
    calls: list = field(default_factory=list, compare=False)

    def validate(self, value, record):
        self.calls.append(value)
        return self.result


class ReadCountingRecord(SemanticRecord):
    """Record that counts attribute reads."""

    def __init__(self, **values):
        super().__init__(**values)
        self.reads = []

    def read_attribute(self, name):
        self.reads.append(name)
        return super().read_attribute(name)


@pytest.fixture
def engine():
    return ValidationEngine()


class TestValidateAll:
    """Test full record validation."""

    def test_required_scenario(self, engine):
        class User(SemanticRecord):
            pass

        User.attribute("username").requires("required")

        errors = engine.validate_all(User(username=""))
        assert len(errors) == 1
        assert errors.on("username") == ["is required."]

        assert len(engine.validate_all(User(username="bob"))) == 0

    def test_returns_record_error_sink(self, engine):
        class User(SemanticRecord):
            pass

        user = User()
        assert engine.validate_all(user) is user.errors

    def test_empty_value_with_allow_empty_skips_check(self, engine):
        class User(SemanticRecord):
            pass

        counting = Counting(result=False)
        User.attribute("nickname").requires(counting)

        for value in [None, "", [], {}]:
            assert len(engine.validate_all(User(nickname=value))) == 0
        assert counting.calls == []

    def test_empty_value_without_allow_empty_records_message(self, engine):
        class User(SemanticRecord):
            pass

        counting = Counting(allow_empty=False, error_message="must be given.")
        User.attribute("nickname").requires(counting)

        errors = engine.validate_all(User(nickname=""))

        assert errors.on("nickname") == ["must be given."]
        assert counting.calls == []

    def test_missing_attribute_is_empty(self, engine):
        class User(SemanticRecord):
            pass

        User.attribute("username").requires("required")
        assert engine.validate_all(User()).on("username") == ["is required."]

    def test_all_failures_recorded_in_order(self, engine):
        class User(SemanticRecord):
            pass

        User.attribute("username").requires("length", minimum=5).requires("pattern", regex="[a-z]+")
        User.attribute("email").requires("pattern", regex=r".+@.+")

        errors = engine.validate_all(User(username="B0", email="nope"))

        assert errors.full_messages() == [
            "username has the wrong length.",
            "username is not in the right format.",
            "email is not in the right format.",
        ]

    def test_passing_value_calls_check_with_record(self, engine):
        class User(SemanticRecord):
            pass

        counting = Counting()
        User.attribute("username").requires(counting)

        assert len(engine.validate_all(User(username="bob"))) == 0
        assert counting.calls == ["bob"]

    def test_field_without_applicable_predicates_is_not_read(self, engine):
        class User(ReadCountingRecord):
            pass

        User.attribute("expensive").requires("required", validate_if=lambda record: False)
        User.attribute("username").requires("required")

        user = User(username="bob")
        engine.validate_all(user)

        assert user.reads == ["username"]

    def test_value_read_once_per_field(self, engine):
        class User(ReadCountingRecord):
            pass

        User.attribute("username").requires("required").requires("length", maximum=8)

        user = User(username="bob")
        engine.validate_all(user)

        assert user.reads == ["username"]

    def test_blank_whitespace_config(self):
        class User(SemanticRecord):
            pass

        User.attribute("username").requires("required")
        engine = ValidationEngine(SemattrConfig(validation=ValidationConfig(blank_whitespace=True)))

        assert engine.validate_all(User(username="   ")).on("username") == ["is required."]
        assert len(ValidationEngine().validate_all(User(username="   "))) == 0


class TestApplicability:
    """Test validate_if and validate_on handling."""

    def test_validate_if_callable_false_skips_check(self, engine):
        class User(SemanticRecord):
            pass

        counting = Counting(result=False, validate_if=lambda record: record.active)
        User.attribute("username").requires(counting)

        assert len(engine.validate_all(User(username="bob", active=False))) == 0
        assert counting.calls == []

        assert len(engine.validate_all(User(username="bob", active=True))) == 1
        assert counting.calls == ["bob"]

    def test_validate_if_method_name(self, engine):
        class User(SemanticRecord):
            def wants_newsletter(self):
                return self.subscribed

        counting = Counting(result=False, validate_if="wants_newsletter")
        User.attribute("email").requires(counting)

        assert len(engine.validate_all(User(email="x", subscribed=False))) == 0
        assert counting.calls == []
        assert len(engine.validate_all(User(email="x", subscribed=True))) == 1

    def test_validate_if_attribute_name(self, engine):
        class User(SemanticRecord):
            pass

        User.attribute("email").requires("required", validate_if="subscribed")

        assert len(engine.validate_all(User(subscribed=False))) == 0
        assert len(engine.validate_all(User(subscribed=True))) == 1

    def test_validate_if_missing_method_raises(self, engine):
        class User(SemanticRecord):
            pass

        User.attribute("email").requires("required", validate_if="wants_newsletter")

        with pytest.raises(ConditionError, match="wants_newsletter"):
            engine.validate_all(User())

    def test_validate_on_create(self, engine):
        class User(SemanticRecord):
            pass

        counting = Counting(result=False, validate_on="create")
        User.attribute("username").requires(counting)

        user = User(username="bob")
        assert len(engine.validate_all(user)) == 1

        user = User(username="bob")
        user.mark_persisted()
        assert len(engine.validate_all(user)) == 0
        assert counting.calls == ["bob"]

    def test_validate_on_update(self, engine):
        class User(SemanticRecord):
            pass

        counting = Counting(result=False, validate_on="update")
        User.attribute("username").requires(counting)

        assert len(engine.validate_all(User(username="bob"))) == 0
        assert counting.calls == []

        user = User(username="bob")
        user.mark_persisted()
        assert len(engine.validate_all(user)) == 1

    def test_both_conditions_must_pass(self, engine):
        class User(SemanticRecord):
            pass

        predicate = Counting(validate_if=lambda record: True, validate_on="update")
        user = User()

        assert engine.is_applicable(predicate, user) is False
        user.mark_persisted()
        assert engine.is_applicable(predicate, user) is True


class TestIsAttributeValid:
    """Test the single-attribute validity query."""

    @pytest.mark.parametrize("username,expected", [
        ("", False),
        (None, False),
        ("bob", True),
        ("bobbybobbington", False),
    ])
    def test_matches_full_validation(self, engine, username, expected):
        class User(SemanticRecord):
            pass

        User.attribute("username").requires("required").requires("length", maximum=8)
        user = User(username=username)

        assert engine.is_attribute_valid(user, "username") is expected
        assert len(user.errors) == 0
        assert (len(engine.validate_all(user).on("username")) == 0) is expected

    def test_empty_value_with_allow_empty(self, engine):
        class User(SemanticRecord):
            pass

        counting = Counting(result=False)
        User.attribute("nickname").requires(counting)

        assert engine.is_attribute_valid(User(nickname=""), "nickname") is True
        assert engine.is_attribute_valid(User(nickname="x"), "nickname") is False
        assert counting.calls == ["x"]

    def test_empty_value_without_allow_empty_skips_check(self, engine):
        class User(SemanticRecord):
            pass

        counting = Counting(allow_empty=False)
        User.attribute("nickname").requires(counting)

        assert engine.is_attribute_valid(User(nickname=""), "nickname") is False
        assert counting.calls == []

    def test_inapplicable_predicates_ignored(self, engine):
        class User(SemanticRecord):
            pass

        User.attribute("username").requires("required", validate_on="update")
        assert engine.is_attribute_valid(User(username=""), "username") is True

    def test_unknown_field_is_valid(self, engine):
        class User(SemanticRecord):
            pass

        assert engine.is_attribute_valid(User(), "anything") is True


class TestExpectedErrorFor:
    """Test the out-of-context expected-error query."""

    def test_confirmation_scenario(self, engine):
        class User(SemanticRecord):
            pass

        User.attribute("password_confirmation").requires("same_as", other="password")

        message = engine.expected_error_for(
            User, "password_confirmation", "mismatched", {"password": "opensesame"}
        )
        assert message == "must be the same as password."

        assert engine.expected_error_for(
            User, "password_confirmation", "opensesame", {"password": "opensesame"}
        ) is None

    def test_returns_first_failure_in_registration_order(self, engine):
        class User(SemanticRecord):
            pass

        User.attribute("username").requires("length", minimum=5).requires("pattern", regex="[a-z]+")

        assert engine.expected_error_for(User, "username", "B0") == "has the wrong length."
        assert engine.expected_error_for(User, "username", "B0bby") == "is not in the right format."
        assert engine.expected_error_for(User, "username", "bobby") is None

    def test_unknown_field(self, engine):
        class User(SemanticRecord):
            pass

        assert engine.expected_error_for(User, "username", "bob") is None

    def test_skips_applicability_and_empty_rules(self, engine):
        class User(SemanticRecord):
            pass

        counting = Counting(result=False, validate_if=lambda record: False, error_message="counted.")
        User.attribute("nickname").requires(counting)

        assert engine.expected_error_for(User, "nickname", "") == "counted."
        assert counting.calls == [""]

    def test_unified_mode_applies_full_rules(self):
        class User(SemanticRecord):
            pass

        counting = Counting(result=False, validate_if=lambda record: False)
        User.attribute("nickname").requires(counting)
        User.attribute("username").requires("required")

        engine = ValidationEngine(SemattrConfig(validation=ValidationConfig(unify_expected_error=True)))

        assert engine.expected_error_for(User, "nickname", "x") is None
        assert counting.calls == []
        assert engine.expected_error_for(User, "username", "") == "is required."

    def test_unified_mode_per_call(self, engine):
        class User(SemanticRecord):
            pass

        User.attribute("nickname").requires("length", minimum=3)

        assert engine.expected_error_for(User, "nickname", "") == "has the wrong length."
        assert engine.expected_error_for(User, "nickname", "", unify=True) is None

    def test_unified_mode_resolves_named_conditions(self):
        class User(SemanticRecord):
            def wants_newsletter(self):
                return self.subscribed

        User.attribute("email").requires("required", validate_if="wants_newsletter")
        engine = ValidationEngine()

        assert engine.expected_error_for(User, "email", "", {"subscribed": False}, unify=True) is None
        assert engine.expected_error_for(User, "email", "", {"subscribed": True}, unify=True) == "is required."

    def test_context_is_a_new_record(self, engine):
        class User(SemanticRecord):
            pass

        User.attribute("username").requires("length", minimum=5, validate_on="update")

        assert engine.expected_error_for(User, "username", "bob", unify=True) is None

    def test_unified_mode_resolves_class_attribute_condition(self):
        class User(SemanticRecord):
            newsletter_enabled = True

        User.attribute("email").requires("required", validate_if="newsletter_enabled")
        engine = ValidationEngine()

        assert engine.validate_all(User()).on("email") == ["is required."]
        assert engine.expected_error_for(User, "email", "", unify=True) == "is required."

    def test_unified_mode_resolves_static_and_class_methods(self):
        class User(SemanticRecord):
            @staticmethod
            def always():
                return True

            @classmethod
            def never(cls):
                return cls.__name__ != "User"

        User.attribute("email").requires("required", validate_if="always")
        User.attribute("nickname").requires("required", validate_if="never")
        engine = ValidationEngine()

        assert engine.expected_error_for(User, "email", "", unify=True) == "is required."
        assert engine.expected_error_for(User, "nickname", "", unify=True) is None
