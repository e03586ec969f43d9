"""Validation runner for recordkit.

Validators run sequentially in declaration order so that error message
order is reproducible for identical input.
"""

import logging
from collections.abc import Iterable
from typing import Any

from recordkit.conditions import guards_pass
from recordkit.validation.types import ValidatorSpec

logger = logging.getLogger(__name__)


class ValidationRunner:
    """Runs a record type's validators against one record."""

    def run(
        self,
        record: Any,
        validators: Iterable[ValidatorSpec],
        context: str | None = None,
    ) -> bool:
        """Validate record.

        Args:
            record: Object exposing an ErrorCollection as record.errors
            validators: Validator specs in declaration order
            context: Validation context (e.g. "create"); specs with a
                non-matching `on` are skipped

        Returns:
            True if record.errors is empty afterwards
        """
        record.errors.clear()

        for spec in validators:
            if not spec.applies_to(context):
                logger.debug(
                    "Skipping %s: not configured for context %r",
                    type(spec.validator).__name__,
                    context,
                )
                continue
            if not guards_pass(record, spec.if_, spec.unless):
                logger.debug(
                    "Skipping %s: guard conditions not met",
                    type(spec.validator).__name__,
                )
                continue
            spec.validator.validate(record)

        return record.errors.is_empty()
