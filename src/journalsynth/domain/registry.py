"""Registry maintenance domain service."""

from typing import Optional

from journalsynth.database.base import Database
from journalsynth.domain.entities import (
    AccountRef,
    CentralDefaults,
    ChartAccount,
    DocumentType,
    EntityAccountMapping,
)
from journalsynth.domain.errors import NotFoundError, ValidationError
from journalsynth.utils.tax_id import normalize_tax_id

DEFAULT_FIELDS = (
    "default_expense",
    "default_income",
    "input_tax",
    "output_tax",
    "payables",
    "receivables",
)


class RegistryService:
    """Service for maintaining a company's chart, entity registry and defaults."""

    def __init__(self, db: Database, company_id: str):
        """Initialize registry service.

        Args:
            db: Database instance
            company_id: Company whose registry is maintained
        """
        if not company_id or not company_id.strip():
            raise ValidationError("Company id is required")
        self.db = db
        self.company_id = company_id

    def add_account(self, code: str, name: str, is_active: bool = True) -> None:
        """Add or update a chart-of-accounts record.

        Raises:
            ValidationError: If code or name is blank
        """
        if not code.strip() or not name.strip():
            raise ValidationError("Account code and name are required")
        self.db.upsert_account(self.company_id, code.strip(), name.strip(), is_active=is_active)

    def list_accounts(self) -> list[ChartAccount]:
        return self.db.list_accounts(self.company_id)

    def resolve_account(self, code: str) -> AccountRef:
        """Look up a chart account by code.

        Raises:
            NotFoundError: If the code is not in the chart
        """
        for account in self.db.list_accounts(self.company_id):
            if account.code == code:
                return AccountRef(account.code, account.name)
        raise NotFoundError(f"Account {code} is not in the chart of accounts of company {self.company_id}")

    def set_entity(
        self,
        tax_id: str,
        name: str,
        account_code: Optional[str] = None,
        cost_center: Optional[str] = None,
        is_active: bool = True,
    ) -> str:
        """Register an entity and its general account.

        Returns:
            The normalized tax id

        Raises:
            ValidationError: If the tax id is blank
            NotFoundError: If the account code is not in the chart
        """
        normalized = normalize_tax_id(tax_id)
        if not normalized:
            raise ValidationError("Entity tax id is required")
        account = self.resolve_account(account_code) if account_code else None
        self.db.upsert_entity_mapping(
            self.company_id,
            normalized,
            name,
            account=account,
            cost_center=cost_center,
            is_active=is_active,
        )
        return normalized

    def set_override(self, tax_id: str, document_type: str, account_code: str) -> DocumentType:
        """Route one document type of an entity to a specific account.

        Raises:
            ValidationError: If the document type is unknown
            NotFoundError: If the entity or account does not exist
        """
        try:
            parsed = DocumentType.parse(document_type)
        except ValueError as e:
            raise ValidationError(str(e))
        account = self.resolve_account(account_code)
        self.db.set_document_type_account(self.company_id, tax_id, parsed, account)
        return parsed

    def list_entities(self) -> list[EntityAccountMapping]:
        return self.db.list_entity_mappings(self.company_id)

    def set_defaults(self, **codes: Optional[str]) -> CentralDefaults:
        """Store central accounts given by chart code.

        Codes that are not given keep their current value, or the built-in
        fallback when the company has no configuration yet.

        Raises:
            NotFoundError: If a code is not in the chart
        """
        unknown = set(codes) - set(DEFAULT_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown default account fields: {', '.join(sorted(unknown))}")

        current = self.db.get_central_defaults(self.company_id) or CentralDefaults.fallback()
        values = {}
        for name in DEFAULT_FIELDS:
            code = codes.get(name)
            values[name] = self.resolve_account(code) if code else getattr(current, name)
        defaults = CentralDefaults(**values)
        self.db.set_central_defaults(self.company_id, defaults)
        return defaults

    def get_defaults(self) -> Optional[CentralDefaults]:
        return self.db.get_central_defaults(self.company_id)
