"""Basic usage example for the Klaviyo client."""

import httpx

from klaviyo_client import Klaviyo, setup_logging
from klaviyo_client.exceptions import MissingIdentifierError


def main():
    """Demonstrate basic Klaviyo client usage."""

    setup_logging(level="VERBOSE")

    client = Klaviyo(
        "PUBLIC_KEY",
        private_key="PRIVATE_KEY",
        retry_count=3,
        timeout=10.0,
        log_level="verbose",
    )

    try:
        # Track an event
        print("Tracking event...")
        result = client.track(
            "Filled out profile",
            {"$email": "someone@example.com", "$first_name": "Ann"},
            {"Added social accounts": False},
        )
        print(f"Result: {result}")  # 1, or 0 if Klaviyo rejected it

        # Update profile properties
        print("\nIdentifying profile...")
        client.identify({"$email": "someone@example.com", "plan": "pro"})

        # Privileged calls
        print("\nSubscribing to list...")
        client.subscribe("LIST_ID", ["someone@example.com", "other@example.com"])

        print("\nSuppressing email...")
        client.suppress("unsubscribed@example.com")

    except MissingIdentifierError as e:
        print(f"Bad customer properties: {e}")

    except httpx.HTTPStatusError as e:
        print(f"Klaviyo answered {e.response.status_code}")

    except httpx.HTTPError as e:
        print(f"Request failed: {e}")

    finally:
        client.close()


if __name__ == "__main__":
    main()
