"""Built-in attribute constraint validators.

These validators check attribute values against declared constraints:
- presence / absence: value must (not) be blank
- length: size bounds for strings and collections
- format: regex pattern matching
- inclusion / exclusion: membership in a collection
- numericality: numeric type and bounds
- acceptance: value must be one of the accepted tokens
"""

import math
import operator
import re
from collections.abc import Callable, Collection
from decimal import Decimal, InvalidOperation
from typing import Any

from recordkit.validation.validators.base import EachValidator, is_blank


class PresenceValidator(EachValidator):
    """Value must not be None, whitespace-only, or an empty collection."""

    def validate_each(self, record: Any, attribute: str, value: Any) -> None:
        if is_blank(value):
            self.add_error(record, attribute, "blank")


class AbsenceValidator(EachValidator):
    """Value must be blank."""

    def validate_each(self, record: Any, attribute: str, value: Any) -> None:
        if not is_blank(value):
            self.add_error(record, attribute, "present")


class LengthValidator(EachValidator):
    """Length bounds for strings and collections.

    Args:
        minimum: Smallest allowed length
        maximum: Largest allowed length
        is_: Exact required length
        in_: A range (or (min, max) pair) of allowed lengths

    None is treated as length 0. Values without len() (numbers, dates)
    are measured by their string form.
    """

    def __init__(
        self,
        attributes,
        *,
        minimum: int | None = None,
        maximum: int | None = None,
        is_: int | None = None,
        in_: range | tuple[int, int] | None = None,
        **options: Any,
    ):
        super().__init__(attributes, **options)
        if in_ is not None:
            if isinstance(in_, range):
                minimum, maximum = in_.start, in_.stop - 1
            else:
                minimum, maximum = in_
        if minimum is None and maximum is None and is_ is None:
            raise ValueError("LengthValidator needs minimum, maximum, is_ or in_")
        self.minimum = minimum
        self.maximum = maximum
        self.is_ = is_

    def validate_each(self, record: Any, attribute: str, value: Any) -> None:
        length = self._length(value)

        if self.is_ is not None and length != self.is_:
            self.add_error(record, attribute, "wrong_length", count=self.is_)
            return
        if self.minimum is not None and length < self.minimum:
            self.add_error(record, attribute, "too_short", count=self.minimum)
        if self.maximum is not None and length > self.maximum:
            self.add_error(record, attribute, "too_long", count=self.maximum)

    @staticmethod
    def _length(value: Any) -> int:
        """None is empty; values without len() are measured as strings."""
        if value is None:
            return 0
        if hasattr(value, "__len__"):
            return len(value)
        return len(str(value))


class FormatValidator(EachValidator):
    """Value (as a string) must match with_, or must not match without."""

    def __init__(
        self,
        attributes,
        *,
        with_: str | re.Pattern | None = None,
        without: str | re.Pattern | None = None,
        **options: Any,
    ):
        super().__init__(attributes, **options)
        if (with_ is None) == (without is None):
            raise ValueError("FormatValidator needs exactly one of with_ or without")
        self.with_ = re.compile(with_) if isinstance(with_, str) else with_
        self.without = re.compile(without) if isinstance(without, str) else without

    def validate_each(self, record: Any, attribute: str, value: Any) -> None:
        text = "" if value is None else str(value)
        if self.with_ is not None and not self.with_.search(text):
            self.add_error(record, attribute, "invalid", value=value)
        elif self.without is not None and self.without.search(text):
            self.add_error(record, attribute, "invalid", value=value)


class _MembershipValidator(EachValidator):
    """Shared membership check; subclasses set code and expected_member."""

    code: str
    expected_member: bool

    def __init__(
        self,
        attributes,
        *,
        in_: Collection[Any] | Callable[[Any], Collection[Any]],
        **options: Any,
    ):
        super().__init__(attributes, **options)
        self.in_ = in_

    def members(self, record: Any) -> Collection[Any]:
        if callable(self.in_):
            return self.in_(record)
        return self.in_

    def is_member(self, record: Any, value: Any) -> bool:
        members = self.members(record)
        if isinstance(members, range) and isinstance(value, (int, float)):
            return members.start <= value < members.stop
        return value in members

    def validate_each(self, record: Any, attribute: str, value: Any) -> None:
        if self.is_member(record, value) != self.expected_member:
            self.add_error(record, attribute, self.code, value=value)


class InclusionValidator(_MembershipValidator):
    """Value must be in the given collection (or callable(record) result)."""

    code = "inclusion"
    expected_member = True


class ExclusionValidator(_MembershipValidator):
    """Value must not be in the given collection."""

    code = "exclusion"
    expected_member = False


class NumericalityValidator(EachValidator):
    """Value must be a number (or numeric string) within the given bounds.

    Booleans are not numbers.
    """

    CHECKS: dict[str, Callable[[Any, Any], bool]] = {
        "greater_than": operator.gt,
        "greater_than_or_equal_to": operator.ge,
        "equal_to": operator.eq,
        "less_than": operator.lt,
        "less_than_or_equal_to": operator.le,
        "other_than": operator.ne,
    }

    def __init__(
        self,
        attributes,
        *,
        only_integer: bool = False,
        odd: bool = False,
        even: bool = False,
        greater_than: Any = None,
        greater_than_or_equal_to: Any = None,
        equal_to: Any = None,
        less_than: Any = None,
        less_than_or_equal_to: Any = None,
        other_than: Any = None,
        **options: Any,
    ):
        super().__init__(attributes, **options)
        self.only_integer = only_integer
        self.odd = odd
        self.even = even
        bounds = {
            "greater_than": greater_than,
            "greater_than_or_equal_to": greater_than_or_equal_to,
            "equal_to": equal_to,
            "less_than": less_than,
            "less_than_or_equal_to": less_than_or_equal_to,
            "other_than": other_than,
        }
        self.bounds = {k: v for k, v in bounds.items() if v is not None}

    def validate_each(self, record: Any, attribute: str, value: Any) -> None:
        number = self._parse(value)
        if number is None:
            self.add_error(record, attribute, "not_a_number", value=value)
            return

        if self.only_integer and not self._is_integral(number):
            self.add_error(record, attribute, "not_an_integer", value=value)
            return

        for name, bound in self.bounds.items():
            limit = bound(record) if callable(bound) else bound
            if not self.CHECKS[name](number, limit):
                self.add_error(record, attribute, name, count=limit, value=value)

        if self.odd and self._parity(number) != 1:
            self.add_error(record, attribute, "odd", value=value)
        if self.even and self._parity(number) != 0:
            self.add_error(record, attribute, "even", value=value)

    @staticmethod
    def _is_integral(number: int | float | Decimal) -> bool:
        if isinstance(number, int):
            return True
        if isinstance(number, float):
            return number.is_integer()
        return number == number.to_integral_value()

    @classmethod
    def _parity(cls, number: int | float | Decimal) -> int | None:
        """0 for even, 1 for odd, None when number is not integral.

        Decimals are read from their digit tuple, so huge exponents stay cheap.
        """
        if not cls._is_integral(number):
            return None
        if not isinstance(number, Decimal):
            return int(number % 2)
        _, digits, exponent = number.as_tuple()
        if exponent > 0:
            return 0
        # Integral with exponent <= 0: the last -exponent digits are zeros.
        index = len(digits) - 1 + exponent
        return digits[index] % 2 if index >= 0 else 0

    @staticmethod
    def _parse(value: Any) -> int | float | Decimal | None:
        if isinstance(value, bool) or value is None:
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, float):
            return value if math.isfinite(value) else None
        if isinstance(value, Decimal):
            return value if value.is_finite() else None
        if isinstance(value, str):
            text = value.strip()
            if re.fullmatch(r"[+-]?\d+", text):
                try:
                    return int(text)
                except ValueError:
                    # Past the interpreter's int digit limit; Decimal has none.
                    pass
            try:
                number = Decimal(text)
            except InvalidOperation:
                return None
            return number if number.is_finite() else None
        return None


class AcceptanceValidator(EachValidator):
    """Value must be one of the accept tokens (terms-of-service style).

    None is allowed unless allow_none=False is passed.
    """

    def __init__(
        self,
        attributes,
        *,
        accept: Collection[Any] = ("1", "true", True),
        **options: Any,
    ):
        options.setdefault("allow_none", True)
        super().__init__(attributes, **options)
        self.accept = tuple(accept)

    def validate_each(self, record: Any, attribute: str, value: Any) -> None:
        if value not in self.accept:
            self.add_error(record, attribute, "accepted")
