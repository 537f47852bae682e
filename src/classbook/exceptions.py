"""Errors raised by classbook.

Every error derives from :class:`Error`. The first four classes describe
problems with a request (missing entities, ownership violations, malformed
input, timeouts); :class:`FormulaError` and its subclasses describe a
teacher-supplied formula that could not be evaluated.

"""

import copy
from typing import Any, Mapping, Optional


class Error(Exception):
    """Generic error."""


class NotFound(Error, LookupError):
    """A class, unit, student or evaluation item does not exist.

    Parameters
    ----------
    resource : str
        A human-readable name of the kind of entity, e.g., ``"Unit"``.
    resource_id : Any
        The identifier that was looked up.

    """

    def __init__(self, resource: str, resource_id: Any = None):
        self.resource = resource
        self.resource_id = resource_id
        message = f"{resource} not found"
        if resource_id is not None:
            message += f" with id: {resource_id}"
        super().__init__(message)


class Forbidden(Error, PermissionError):
    """The caller does not own the class, or an entity is outside the class."""


class BadRequest(Error, ValueError):
    """A malformed operation, e.g., an empty batch of grades."""


class ComputationTimeout(Error, TimeoutError):
    """A per-student or per-unit computation did not finish in time."""


class FormulaError(Error, ValueError):
    """A formula could not be parsed or evaluated.

    Formula errors are deterministic: retrying with the same grades and the
    same formula fails the same way. They always point at a misconfigured
    class or unit formula.

    Parameters
    ----------
    message : str
        What went wrong.
    formula : Optional[str]
        The formula text.
    context : Optional[Mapping[str, Any]]
        Where the formula was being evaluated: student, unit and class ids
        and names. More context can be attached later with
        :meth:`with_context`.
    hint : Optional[str]
        An actionable suggestion appended to the message, such as
        "check the unit's formula".

    """

    def __init__(
        self,
        message: str,
        formula: Optional[str] = None,
        context: Optional[Mapping[str, Any]] = None,
        hint: Optional[str] = None,
    ):
        self.message = message
        self.formula = formula
        self.context = dict(context) if context else {}
        self.hint = hint
        super().__init__(message)

    def with_context(self, hint: Optional[str] = None, **context) -> "FormulaError":
        """A copy of this error with additional context attached."""
        new = copy.copy(self)
        new.context = {**self.context, **context}
        if hint is not None:
            new.hint = hint
        return new

    def __str__(self):
        parts = [self.message if self.message.endswith(".") else self.message + "."]
        if self.formula is not None:
            parts.append(f"Formula: {self.formula!r}.")
        if self.context:
            described = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            parts.append(f"Context: {described}.")
        if self.hint is not None:
            parts.append(self.hint[0].upper() + self.hint[1:] + ".")
        return " ".join(parts)


class UnknownVariable(FormulaError):
    """A formula refers to a name that is not bound."""

    def __init__(self, name: str, formula: Optional[str] = None, **kwargs):
        self.name = name
        super().__init__(f"Unknown variable '{name}'.", formula, **kwargs)


class DivisionByZero(FormulaError):
    """A formula divided by zero."""

    def __init__(self, formula: Optional[str] = None, **kwargs):
        super().__init__("Division by zero.", formula, **kwargs)


class FormulaSyntaxError(FormulaError):
    """A formula is not a well-formed arithmetic expression."""

    def __init__(
        self, message: str, formula: Optional[str] = None, position: Optional[int] = None, **kwargs
    ):
        self.position = position
        if position is not None:
            message = f"{message} (at position {position})"
        super().__init__(message, formula, **kwargs)
