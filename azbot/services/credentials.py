from dataclasses import dataclass
from typing import Optional, Sequence


class CredentialParseError(ValueError):
    def __init__(self, segment_count: int):
        self.segment_count = segment_count
        super().__init__(f"Expected 3 comma-separated values, got {segment_count}")


@dataclass(frozen=True)
class CredentialTuple:
    """Service principal credentials: AD application id, password and tenant."""

    client_id: str
    client_secret: str
    tenant_id: str

    def as_list(self) -> list[str]:
        return [self.client_id, self.client_secret, self.tenant_id]

    @classmethod
    def from_list(cls, values: Optional[Sequence]) -> Optional["CredentialTuple"]:
        if not isinstance(values, (list, tuple)) or len(values) != 3:
            return None
        if not all(isinstance(value, str) and value for value in values):
            return None
        return cls(*values)

    def __repr__(self) -> str:
        return f"CredentialTuple(client_id={self.client_id!r}, client_secret='***', tenant_id={self.tenant_id!r})"


def parse_credentials(text: str) -> CredentialTuple:
    """Split `client id, password, tenant id` into a CredentialTuple.

    Empty segments between separators are dropped. Anything other than exactly
    three remaining segments raises CredentialParseError.
    """
    segments = [segment for segment in (text or "").split(",") if segment]
    if len(segments) != 3:
        raise CredentialParseError(len(segments))
    return CredentialTuple(segments[0], segments[1], segments[2])
