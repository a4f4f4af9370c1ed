from app.models.company import CompanyInfo


async def get_company_info() -> CompanyInfo:
    """The stored letterhead, or the built-in default when none was saved yet."""
    company = await CompanyInfo.find_all().first_or_none()
    return company or CompanyInfo()
