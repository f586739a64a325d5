"""
Shared route dependencies.
"""

from fastapi import Header


async def get_organization_id(
    organization_id: int = Header(..., alias="X-Organization-ID", gt=0),
) -> int:
    """Tenant scope for every engine operation, taken from the X-Organization-ID header."""
    return organization_id
