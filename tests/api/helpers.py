"""API test helpers."""


def headers_for(person) -> dict[str, str]:
    """Identity headers the upstream gateway would attach for this person."""
    return {
        "X-Principal-Id": str(person.id),
        "X-Principal-Role": person.principal.role.value,
    }
