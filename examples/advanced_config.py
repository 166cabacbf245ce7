"""Advanced configuration example for the Klaviyo client."""

from klaviyo_client import ClientConfig, ExponentialBackoff, Klaviyo, LogLevel


class PrintSink:
    """Log sink writing straight to stdout."""

    def log(self, level: LogLevel, message: str, **context):
        print(f"[{LogLevel(level).value}] {message} {context or ''}")


def main():
    """Demonstrate advanced Klaviyo client configuration."""

    config = ClientConfig(
        public_key="PUBLIC_KEY",
        private_key="PRIVATE_KEY",
        api_base_path="https://a.klaviyo.com/api",

        # Connection settings
        timeout=15.0,
        connect_timeout=3.0,

        # Up to 6 attempts, waiting 0.5s, 1.5s, 4.5s, ... between them
        retry_count=5,
        backoff=ExponentialBackoff(
            initial_delay=0.5,
            multiplier=3.0,
            jitter=True,
            jitter_ratio=0.2,
        ),

        # Custom sink receives every level
        log_sink=PrintSink(),
    )

    with Klaviyo(config=config) as client:
        client.identify({"$id": "42", "plan": "enterprise"})


if __name__ == "__main__":
    main()
