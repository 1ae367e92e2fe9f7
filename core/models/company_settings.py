"""Company (issuer) settings model."""

from pydantic import Field

from core.models.base import StoredModel


class CompanySettings(StoredModel):
    """Issuer details printed on invoices. Replaced wholesale, no identity."""

    name: str
    address: str
    phone: str
    email: str
    bank_name: str = Field(alias="bankName")
    bank_account: str = Field(alias="bankAccount")
    bank_ifsc: str = Field(alias="bankIFSC")
    logo_path: str | None = Field(None, alias="logoPath")

    @classmethod
    def default(cls) -> "CompanySettings":
        return cls(
            name="Your Company Name",
            address="Your Address, City, State, PIN Code",
            phone="+1234567890",
            email="info@yourcompany.com",
            bank_name="Your Bank Name",
            bank_account="1234567890123456",
            bank_ifsc="YOURBANK123",
            logo_path=None,
        )
