"""Example bulk identifier registration.

Many identifiers can be registered without waiting for each request to finish. The requests
are queued and sent to EZID by a fixed number of workers, failures are logged.

1. Set `EZID_USER` and `EZID_PASSWORD` to your EZID account, `EZID_URL` to use another EZID instance
2. Change `shoulder` to a shoulder your account is allowed to use
3. Run `python examples/bulk_create.py`
"""

import asyncio
import time

from ezid_client.conf.ezid import ezid_config
from ezid_client.profiles import DataCiteProfile, DataCiteResourceType, InternalProfile
from ezid_client.services.request_queue import EzidClient

# settings
shoulder = "doi:10.5072/FK2"
count = 100


async def main() -> None:
    config = ezid_config()
    async with EzidClient(config=config) as client:
        if not await client.login(config.EZID_USER or "", config.EZID_PASSWORD or ""):
            print("Login failed, check the credentials")
            return

        # writes are queued
        futures = []
        for number in range(count):
            identifier = f"{shoulder}/TEST/{int(time.time())}-{number}"
            metadata = {
                InternalProfile.TARGET: f"https://example.org/datasets/{number}",
                InternalProfile.STATUS: "reserved",
                DataCiteProfile.TITLE: f"Test dataset {number}",
                DataCiteProfile.CREATOR: "Doe, Jane",
                DataCiteProfile.PUBLISHER: "Example publisher",
                DataCiteProfile.PUBLICATION_YEAR: "2024",
                DataCiteProfile.RESOURCE_TYPE: DataCiteResourceType.DATASET,
            }
            futures.append(client.create(identifier, metadata))

        # reads are not
        minted = await client.service.mint(shoulder, {InternalProfile.STATUS: "reserved"})
        print(minted, await client.service.get_metadata(minted))

        outcomes = await asyncio.gather(*futures)
        print(f"{sum(outcome.ok for outcome in outcomes)} of {count} identifiers created")


asyncio.run(main())
