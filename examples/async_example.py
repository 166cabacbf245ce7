"""Async usage example for the Klaviyo client."""

import asyncio

import httpx

from klaviyo_client import AsyncKlaviyo


async def main():
    """Demonstrate async Klaviyo client usage."""

    async with AsyncKlaviyo("PUBLIC_KEY", retry_count=2) as client:

        # Concurrent track calls share one connection pool
        print("Tracking events concurrently...")
        tasks = [
            client.track("Viewed Product", {"$id": f"user-{i}"}, {"sku": "ABC"})
            for i in range(1, 6)
        ]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        for result in results:
            if isinstance(result, httpx.HTTPError):
                print(f"  - failed: {result}")
            else:
                print(f"  - {result}")


if __name__ == "__main__":
    asyncio.run(main())
