"""
Validation outcome model shared by every rule.
"""

from pydantic import BaseModel, Field


class BusinessRuleResult(BaseModel):
    """
    Outcome of a validation call.

    Errors are hard failures that should block a write; warnings are
    advisories. Produced fresh per call and never persisted.
    """

    is_valid: bool = True
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @classmethod
    def passed(cls) -> "BusinessRuleResult":
        return cls()

    @classmethod
    def failed(cls, message: str) -> "BusinessRuleResult":
        return cls(is_valid=False, errors=[message])

    def add_error(self, message: str) -> None:
        self.is_valid = False
        self.errors.append(message)

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    def merge(self, other: "BusinessRuleResult") -> "BusinessRuleResult":
        """
        Fold another result into this one.

        Errors and warnings are appended in order and validity is ANDed.

        Returns:
            self, to allow chaining
        """
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        if not other.is_valid:
            self.is_valid = False
        return self
