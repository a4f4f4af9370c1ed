from datetime import datetime

from fastapi import APIRouter, Depends

from app.dependencies.auth import get_actor
from app.models.company import CompanyInfo
from app.schemas.company import CompanyInfoUpdate, CompanyInfoResponse
from app.services.activity import log_activity
from app.services.company import get_company_info

router = APIRouter()


@router.get("", response_model=CompanyInfoResponse)
async def read_company_info():
    return await get_company_info()


@router.put("", response_model=CompanyInfoResponse)
async def update_company_info(
    data: CompanyInfoUpdate,
    actor: str = Depends(get_actor)
):
    """Replace the letterhead used on PDF and Excel reports."""
    company = await CompanyInfo.find_all().first_or_none()

    if company:
        await company.update({"$set": {**data.model_dump(), "updated_at": datetime.utcnow()}})
        company = await CompanyInfo.get(company.id)
    else:
        company = CompanyInfo(**data.model_dump())
        await company.insert()

    await log_activity(actor, f"Updated company information: {company.name}")
    return company
