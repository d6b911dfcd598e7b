"""Shared domain error messages and error types."""

from decimal import Decimal


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Malformed request or invalid input record."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConfigurationError(DomainError):
    """Invalid per-deployment configuration, such as batch limits."""


class ConflictError(DomainError):
    """Domain conflict, such as a journal reference that is already stored."""


class StoreError(DomainError):
    """A collaborator store read or write failed."""


def missing_request_field(field: str) -> str:
    """Return message for a missing required request field."""
    return f"Missing required field: {field}"


def invalid_transaction(index: int, reason: str) -> str:
    """Return message for a malformed transaction at a list position."""
    return f"Transaction {index}: {reason}"


def entity_not_configured(tax_id: str) -> str:
    """Return warning for an entity without an account mapping."""
    return f"Entity {tax_id} is not configured in the entity registry"


def entity_without_account(name: str, tax_id: str) -> str:
    """Return warning for a mapped entity with no target account."""
    return f"Entity {name} ({tax_id}) has no ledger account assigned"


def entity_inactive(name: str, tax_id: str) -> str:
    """Return warning for an inactive entity mapping."""
    return f"Entity {name} ({tax_id}) is inactive"


def account_not_in_chart(account_code: str, owner: str) -> str:
    """Return error for a referenced account missing from the chart of accounts."""
    return f"Account {account_code} assigned to {owner} does not exist in the active chart of accounts"


def entity_uses_default(tax_id: str, account_code: str) -> str:
    """Return warning for an entity that falls back to a global default account."""
    return f"Entity {tax_id} will be posted to default account {account_code}"


def unbalanced_entry(reference: str, debit: Decimal, credit: Decimal) -> str:
    """Return message for an entry whose debits and credits differ."""
    return (
        f"Entry {reference} is unbalanced: debit {debit} vs credit {credit} "
        f"(difference {debit - credit})"
    )


def oversized_transaction(document_number: str, limit_name: str) -> str:
    """Return warning for a single transaction that exceeds a batch limit on its own."""
    return f"Document {document_number} alone exceeds the {limit_name} limit and was placed in its own batch"


def document_types_without_account(name: str, tax_id: str, document_types: list[str]) -> str:
    """Return warning for document types an override-only mapping does not cover."""
    return f"Entity {name} ({tax_id}) has no ledger account for document type {', '.join(document_types)}"
