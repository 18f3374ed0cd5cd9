"""Seed companies and their services from catalog.json into the database.

For each company:
1. Insert the aggregate (company, addresses, working hours)
2. Insert its services, linked to addresses by their position in the
   company's ``addresses`` list (``address_refs``)

Tables are created first if they do not exist.
"""

import asyncio
import json
import sys
from pathlib import Path

# Add project root to path
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from dotenv import load_dotenv

load_dotenv(ROOT / ".env")

from sellerservice.core.database import create_engine, create_schema, create_session_factory
from sellerservice.core.logging import setup_logging
from sellerservice.dao.company_dao import CompanyDAO
from sellerservice.dao.service_dao import ServiceDAO
from sellerservice.schemas.company import CreateCompanyRequest
from sellerservice.schemas.service import CreateServiceRequest

CATALOG_FILE = ROOT / "scripts" / "catalog.json"


async def main() -> None:
    setup_logging()
    path = Path(sys.argv[1]) if len(sys.argv) > 1 else CATALOG_FILE
    with open(path) as f:
        catalog = json.load(f)

    engine = create_engine(pool_size=2, max_overflow=0)
    factory = create_session_factory(engine)

    async with engine.begin() as conn:
        await create_schema(conn)

    company_dao = CompanyDAO()
    service_dao = ServiceDAO()
    print(f"Seeding {len(catalog)} companies ...")

    for entry in catalog:
        services = entry.pop("services", [])
        request = CreateCompanyRequest.model_validate(entry)
        async with factory() as session:
            async with session.begin():
                company = await company_dao.create(session, request.to_domain())
                for item in services:
                    refs = item.pop("address_refs", [])
                    item["address_ids"] = [company.addresses[i].id for i in refs]
                    svc_request = CreateServiceRequest.model_validate(item)
                    await service_dao.create(session, company.id, svc_request.to_domain())
        print(f"  {company.name}: id={company.id}, {len(services)} services")

    await engine.dispose()
    print("Done.")


if __name__ == "__main__":
    asyncio.run(main())
