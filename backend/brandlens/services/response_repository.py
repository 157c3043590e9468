"""
Response Repository
Read/write boundary between the citation worker and the response store
"""

import copy
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from brandlens.adapters.parsing.brand_matcher import BrandCatalogEntry
from brandlens.models import BrandCatalogItem, ProviderResponse


@dataclass
class StoredResponse:
    """The parts of a stored response the worker needs"""
    id: UUID
    org_id: UUID
    provider: str
    citations_json: Dict[str, Any] = field(default_factory=dict)


class ResponseRepository(Protocol):
    async def get_response(self, response_id: UUID) -> Optional[StoredResponse]:
        ...

    async def get_org_brands(self, org_id: UUID) -> List[BrandCatalogEntry]:
        ...

    async def save_citations(self, response_id: UUID, citations_json: Dict[str, Any]) -> None:
        ...


class SqlAlchemyResponseRepository:
    """ResponseRepository over the async SQLAlchemy session"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_response(self, response_id: UUID) -> Optional[StoredResponse]:
        row = await self.db.get(ProviderResponse, response_id)
        if row is None:
            return None
        return StoredResponse(
            id=row.id,
            org_id=row.org_id,
            provider=row.provider,
            citations_json=copy.deepcopy(row.citations_json or {}),
        )

    async def get_org_brands(self, org_id: UUID) -> List[BrandCatalogEntry]:
        """Only the org's own brands; competitors are not verified"""
        result = await self.db.execute(
            select(BrandCatalogItem)
            .where(BrandCatalogItem.org_id == org_id, BrandCatalogItem.is_org_brand == True)
            .order_by(BrandCatalogItem.created_at)
        )
        return [
            BrandCatalogEntry(
                name=item.name,
                variants=tuple(item.variants_json or ()),
                is_org_brand=True,
            )
            for item in result.scalars().all()
            if item.name and item.name.strip()
        ]

    async def save_citations(self, response_id: UUID, citations_json: Dict[str, Any]) -> None:
        row = await self.db.get(ProviderResponse, response_id)
        if row is None:
            return
        # Assign a new object so the JSON column is flagged dirty
        row.citations_json = dict(citations_json)
        row.updated_at = datetime.utcnow()
        await self.db.flush()
