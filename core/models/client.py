"""Client (billing contact) domain model."""

from uuid import uuid4

from core.models.base import StoredModel


class Client(StoredModel):
    """
    A billable contact.

    Identity is the id alone: two clients with the same id are equal even if
    their other fields differ. An empty id marks the unset client.
    """

    id: str
    name: str = ""
    email: str = ""
    address: str = ""
    phone: str = ""

    @classmethod
    def create(cls, name: str, email: str = "", address: str = "", phone: str = "") -> "Client":
        """New client with a generated id."""
        return cls(id=str(uuid4()), name=name, email=email, address=address, phone=phone)

    @classmethod
    def empty(cls) -> "Client":
        return cls(id="")

    @property
    def is_empty(self) -> bool:
        return self.id == ""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Client):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __str__(self) -> str:
        return f"Client(id={self.id}, name={self.name}, email={self.email})"
