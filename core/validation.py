"""
Field validation for invoice, client and company data.

Each field name maps to a ValidationRule. validate() runs, in order:
required check, security screen, length, pattern, business rules, then
sanitizes the value. The first failing step wins and is reported as a
ValidationResult carrying a ValidationErrorKind.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, Iterable, Mapping

from utils.timezone import assume_utc, today_utc


class ValidationLevel(str, Enum):
    BASIC = "basic"
    STRICT = "strict"
    ENTERPRISE = "enterprise"


class ValidationErrorKind(str, Enum):
    """Why a value was rejected."""

    REQUIRED = "required"
    INVALID = "invalid"
    TOO_SHORT = "too_short"
    TOO_LONG = "too_long"
    INVALID_FORMAT = "invalid_format"
    DUPLICATE_FOUND = "duplicate_found"
    BUSINESS_RULE_VIOLATION = "business_rule_violation"
    SECURITY_THREAT = "security_threat"
    INVALID_RANGE = "invalid_range"
    FUTURE_DATE = "future_date"
    PAST_DATE = "past_date"


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one value."""

    is_valid: bool
    error_message: str | None = None
    error_kind: ValidationErrorKind | None = None
    sanitized_value: str | None = None
    confidence: float = 1.0

    @classmethod
    def valid(cls, sanitized_value: str | None = None) -> "ValidationResult":
        return cls(is_valid=True, sanitized_value=sanitized_value)

    @classmethod
    def invalid(
        cls,
        message: str,
        kind: ValidationErrorKind,
        confidence: float = 1.0,
    ) -> "ValidationResult":
        return cls(is_valid=False, error_message=message, error_kind=kind, confidence=confidence)


@dataclass(frozen=True)
class ValidationRule:
    """Constraints applied to one named field."""

    field: str
    required: bool = False
    min_length: int | None = None
    max_length: int | None = None
    pattern: re.Pattern | None = None
    custom_message: str | None = None
    sanitize: bool = True
    level: ValidationLevel = ValidationLevel.BASIC
    forbidden_values: Callable[[], Iterable[str]] | None = None


PATTERNS: dict[str, re.Pattern] = {
    "email": re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"),
    "phone": re.compile(r"^\+?[\d\s\-\(\)]{7,20}$"),
    "invoiceNumber": re.compile(r"^[A-Z0-9\-]{3,20}$"),
    "clientName": re.compile(r"^[a-zA-Z\s\.\,\&]{2,100}$"),
    "companyName": re.compile(r"^[a-zA-Z0-9\s\.\,\&\-]{2,100}$"),
    "address": re.compile(r"^[a-zA-Z0-9\s\.\,\#\-\n]{5,500}$"),
    "amount": re.compile(r"^\d+(\.\d{1,2})?$"),
    "percentage": re.compile(r"^\d{1,2}(\.\d{1,2})?$"),
    "bankAccount": re.compile(r"^[A-Z0-9]{8,20}$"),
    "ifscCode": re.compile(r"^[A-Z]{4}0[A-Z0-9]{6}$"),
    "description": re.compile(r"^[a-zA-Z0-9\s\.\,\-\(\)]{1,500}$"),
    "notes": re.compile(r"^[a-zA-Z0-9\s\.\,\-\(\)\n]{0,1000}$"),
    "website": re.compile(
        r"^https?://(www\.)?[-a-zA-Z0-9@:%._\+~#=]{1,256}\.[a-zA-Z0-9()]{1,6}\b"
        r"([-a-zA-Z0-9()@:%_\+.~#?&/=]*)$"
    ),
}

_THREAT_PATTERNS = [
    re.compile(r"<script[^>]*>.*?</script>", re.IGNORECASE),
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"on\w+\s*=", re.IGNORECASE),
    re.compile(r"(union|select|insert|delete|update|drop)\s+", re.IGNORECASE),
    re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]"),
]

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")

COMMON_FORBIDDEN_VALUES = frozenset({
    "admin", "root", "null", "undefined", "test", "demo", "sample",
    "example", "temp", "temporary", "delete", "remove", "system",
})

STANDARD_RULES: dict[str, ValidationRule] = {
    "clientName": ValidationRule(
        field="clientName",
        required=True,
        min_length=2,
        max_length=100,
        pattern=PATTERNS["clientName"],
        custom_message="Client name must be 2-100 characters with letters, spaces, and basic punctuation only",
    ),
    "companyName": ValidationRule(
        field="companyName",
        required=True,
        min_length=2,
        max_length=100,
        pattern=PATTERNS["companyName"],
        custom_message="Company name must be 2-100 characters with letters, numbers, spaces, and basic punctuation only",
    ),
    "email": ValidationRule(
        field="email",
        pattern=PATTERNS["email"],
        custom_message="Please enter a valid email address",
        level=ValidationLevel.STRICT,
    ),
    "phone": ValidationRule(
        field="phone",
        pattern=PATTERNS["phone"],
        custom_message="Please enter a valid phone number",
    ),
    "address": ValidationRule(
        field="address",
        min_length=5,
        max_length=500,
        pattern=PATTERNS["address"],
        custom_message="Address must be 5-500 characters",
    ),
    "invoiceNumber": ValidationRule(
        field="invoiceNumber",
        required=True,
        min_length=3,
        max_length=20,
        pattern=PATTERNS["invoiceNumber"],
        custom_message="Invoice number must be 3-20 characters with letters, numbers, and hyphens only",
        forbidden_values=lambda: COMMON_FORBIDDEN_VALUES,
    ),
    "amount": ValidationRule(
        field="amount",
        required=True,
        pattern=PATTERNS["amount"],
        custom_message="Please enter a valid amount (e.g., 100.50)",
    ),
    "percentage": ValidationRule(
        field="percentage",
        pattern=PATTERNS["percentage"],
        custom_message="Please enter a valid percentage (0-99.99)",
    ),
    "description": ValidationRule(
        field="description",
        required=True,
        min_length=1,
        max_length=500,
        pattern=PATTERNS["description"],
        custom_message="Description must be 1-500 characters",
    ),
    "notes": ValidationRule(
        field="notes",
        max_length=1000,
        pattern=PATTERNS["notes"],
        custom_message="Notes must be less than 1000 characters",
    ),
    "bankAccount": ValidationRule(
        field="bankAccount",
        min_length=8,
        max_length=20,
        pattern=PATTERNS["bankAccount"],
        custom_message="Bank account must be 8-20 characters with letters and numbers only",
    ),
    "ifscCode": ValidationRule(
        field="ifscCode",
        pattern=PATTERNS["ifscCode"],
        custom_message="IFSC code must be in format: ABCD0123456",
    ),
    "website": ValidationRule(
        field="website",
        pattern=PATTERNS["website"],
        custom_message="Please enter a valid website URL",
    ),
}


class ValidationHelper:
    """
    Stateless validator over the standard rule table.

    Usage:
        validator = ValidationHelper()
        result = validator.validate("ana@example.com", "email")
        if not result.is_valid:
            print(result.error_kind, result.error_message)
    """

    def __init__(self, rules: Mapping[str, ValidationRule] | None = None):
        self._rules = dict(STANDARD_RULES if rules is None else rules)

    def validate(
        self,
        value: str | None,
        field_name: str,
        custom_rule: ValidationRule | None = None,
    ) -> ValidationResult:
        """
        Validate a value against the rule for field_name.

        Args:
            value: Raw input (None and blank are treated alike)
            field_name: Key into the rule table
            custom_rule: Overrides the table rule

        Returns:
            ValidationResult; sanitized_value is set when valid
        """
        rule = custom_rule or self._rules.get(field_name)
        if rule is None:
            return ValidationResult.invalid(
                f"No validation rule found for field: {field_name}",
                ValidationErrorKind.INVALID,
            )

        if value is None or not value.strip():
            if rule.required:
                return ValidationResult.invalid(
                    rule.custom_message or f"{rule.field} is required",
                    ValidationErrorKind.REQUIRED,
                )
            return ValidationResult.valid(None)

        trimmed = value.strip()

        for check in (
            self._validate_security,
            self._validate_length,
            self._validate_pattern,
            self._validate_business_rules,
        ):
            result = check(trimmed, rule)
            if not result.is_valid:
                return result

        sanitized = self.sanitize(trimmed, field_name) if rule.sanitize else trimmed
        return ValidationResult.valid(sanitized)

    def _validate_security(self, value: str, rule: ValidationRule) -> ValidationResult:
        for pattern in _THREAT_PATTERNS:
            if pattern.search(value):
                return ValidationResult.invalid(
                    "Input contains potentially dangerous content",
                    ValidationErrorKind.SECURITY_THREAT,
                    confidence=0.9,
                )

        if rule.field == "email" and ".." in value:
            return ValidationResult.invalid(
                "Email contains invalid consecutive dots",
                ValidationErrorKind.INVALID_FORMAT,
            )

        if (
            rule.field == "amount"
            and value.startswith("0")
            and len(value) > 1
            and not value.startswith("0.")
        ):
            return ValidationResult.invalid(
                "Amount cannot start with zero unless it's a decimal",
                ValidationErrorKind.INVALID_FORMAT,
            )

        return ValidationResult.valid()

    def _validate_length(self, value: str, rule: ValidationRule) -> ValidationResult:
        if rule.min_length is not None and len(value) < rule.min_length:
            return ValidationResult.invalid(
                rule.custom_message or f"{rule.field} must be at least {rule.min_length} characters",
                ValidationErrorKind.TOO_SHORT,
            )
        if rule.max_length is not None and len(value) > rule.max_length:
            return ValidationResult.invalid(
                rule.custom_message or f"{rule.field} must be no more than {rule.max_length} characters",
                ValidationErrorKind.TOO_LONG,
            )
        return ValidationResult.valid()

    def _validate_pattern(self, value: str, rule: ValidationRule) -> ValidationResult:
        if rule.pattern is not None and not rule.pattern.search(value):
            return ValidationResult.invalid(
                rule.custom_message or f"{rule.field} format is invalid",
                ValidationErrorKind.INVALID_FORMAT,
            )
        return ValidationResult.valid()

    def _validate_business_rules(self, value: str, rule: ValidationRule) -> ValidationResult:
        if rule.forbidden_values is not None:
            lowered = value.lower()
            if any(forbidden.lower() == lowered for forbidden in rule.forbidden_values()):
                return ValidationResult.invalid(
                    f'{rule.field} cannot be "{value}" - please choose a different value',
                    ValidationErrorKind.BUSINESS_RULE_VIOLATION,
                )

        if rule.field == "amount":
            amount = _to_float(value)
            if amount is not None:
                if amount < 0:
                    return ValidationResult.invalid(
                        "Amount cannot be negative", ValidationErrorKind.INVALID_RANGE
                    )
                if amount > 999_999_999.99:
                    return ValidationResult.invalid(
                        "Amount is too large (maximum: 999,999,999.99)",
                        ValidationErrorKind.INVALID_RANGE,
                    )
                if amount == 0:
                    return ValidationResult.invalid(
                        "Amount must be greater than zero", ValidationErrorKind.INVALID_RANGE
                    )

        elif rule.field == "percentage":
            percentage = _to_float(value)
            if percentage is not None and not 0 <= percentage <= 99.99:
                return ValidationResult.invalid(
                    "Percentage must be between 0 and 99.99", ValidationErrorKind.INVALID_RANGE
                )

        elif rule.field == "email":
            parts = value.split("@")
            if len(parts) != 2:
                return ValidationResult.invalid(
                    "Email must contain exactly one @ symbol", ValidationErrorKind.INVALID_FORMAT
                )
            if len(parts[1].split(".")) < 2:
                return ValidationResult.invalid(
                    "Email domain must contain at least one dot", ValidationErrorKind.INVALID_FORMAT
                )

        elif rule.field == "phone":
            digits = re.sub(r"\D", "", value)
            if not 7 <= len(digits) <= 15:
                return ValidationResult.invalid(
                    "Phone number must contain 7-15 digits", ValidationErrorKind.INVALID_FORMAT
                )

        return ValidationResult.valid()

    def sanitize(self, value: str, field_name: str) -> str:
        """Normalize a value for storage according to its field."""
        sanitized = _CONTROL_CHARS.sub("", value.strip())

        if field_name in ("email",):
            return sanitized.lower()
        if field_name == "phone":
            return re.sub(r"[^\d\+\-\(\)\s]", "", sanitized)
        if field_name == "amount":
            return re.sub(r"[^\d\.]", "", sanitized)
        if field_name == "invoiceNumber":
            return sanitized.upper()
        if field_name in ("clientName", "companyName"):
            return " ".join(word[0].upper() + word[1:].lower() for word in sanitized.split(" ") if word)
        if field_name == "website":
            sanitized = sanitized.lower()
            if not sanitized.startswith(("http://", "https://")):
                sanitized = f"https://{sanitized}"
            return sanitized
        if field_name in ("description", "notes"):
            return re.sub(r"\s+", " ", sanitized)
        if field_name == "address":
            return re.sub(r" +", " ", re.sub(r"\n+", "\n", sanitized))
        return sanitized

    def validate_date(
        self,
        value: datetime | None,
        field_name: str,
        allow_past: bool = True,
        allow_future: bool = True,
        min_date: datetime | None = None,
        max_date: datetime | None = None,
    ) -> ValidationResult:
        """
        Validate a date at calendar-day granularity for past/future checks.

        min_date/max_date compare full timestamps.
        """
        if value is None:
            return ValidationResult.invalid(f"{field_name} is required", ValidationErrorKind.REQUIRED)

        value = assume_utc(value)
        today = today_utc()
        day = value.date()

        if not allow_past and day < today:
            return ValidationResult.invalid(
                f"{field_name} cannot be in the past", ValidationErrorKind.PAST_DATE
            )
        if not allow_future and day > today:
            return ValidationResult.invalid(
                f"{field_name} cannot be in the future", ValidationErrorKind.FUTURE_DATE
            )
        if min_date is not None and value < assume_utc(min_date):
            return ValidationResult.invalid(
                f"{field_name} must be after {_format_date(min_date)}",
                ValidationErrorKind.INVALID_RANGE,
            )
        if max_date is not None and value > assume_utc(max_date):
            return ValidationResult.invalid(
                f"{field_name} must be before {_format_date(max_date)}",
                ValidationErrorKind.INVALID_RANGE,
            )
        return ValidationResult.valid()

    def validate_form(
        self,
        form_data: Mapping[str, str | None],
        custom_rules: Mapping[str, ValidationRule] | None = None,
    ) -> dict[str, ValidationResult]:
        """Validate every field of a form; keys are field names."""
        custom_rules = custom_rules or {}
        return {
            field_name: self.validate(value, field_name, custom_rule=custom_rules.get(field_name))
            for field_name, value in form_data.items()
        }

    def validate_unique(
        self,
        value: str | None,
        field_name: str,
        existing_values: Iterable[str],
    ) -> ValidationResult:
        """
        Reject a value already present in existing_values.

        Comparison is on sanitized, lower-cased forms. Blank values pass.
        """
        if value is None or not value.strip():
            return ValidationResult.valid(None)

        sanitized = self.sanitize(value, field_name)
        target = sanitized.lower()
        if any(self.sanitize(existing, field_name).lower() == target for existing in existing_values):
            return ValidationResult.invalid(
                f'{field_name} "{value}" already exists', ValidationErrorKind.DUPLICATE_FOUND
            )
        return ValidationResult.valid(sanitized)

    def is_valid_email(self, email: str) -> bool:
        return self.validate(email, "email").is_valid

    def is_valid_phone(self, phone: str) -> bool:
        return self.validate(phone, "phone").is_valid

    def is_valid_amount(self, amount: str) -> bool:
        return self.validate(amount, "amount").is_valid

    @staticmethod
    def format_phone_number(phone: str) -> str:
        """(123) 456-7890 for ten-digit numbers; anything else unchanged."""
        digits = re.sub(r"\D", "", phone)
        if len(digits) == 10:
            return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"
        return phone

    @staticmethod
    def format_amount(amount: str) -> str:
        value = _to_float(amount)
        return f"{value:.2f}" if value is not None else amount


def _to_float(value: str) -> float | None:
    try:
        return float(value)
    except ValueError:
        return None


def _format_date(value: datetime) -> str:
    return f"{value.day}/{value.month}/{value.year}"
