"""
Interactive setup wizard for the desktop collector.

Asks for the sync token shown at /auth/token in the dashboard and saves it
to the collector directory (~/.chronos/ by default) with owner-only
permissions (0700 dir / 0600 file).

Usage:
    python -m chronos setup
    python -m chronos.scripts.setup   (direct invocation)

Re-run whenever the token expires (every 30 days).
"""
import sys

from chronos.collector.credentials import TokenStore
from chronos.config import get_settings


def run_setup() -> None:
    settings = get_settings()
    store = TokenStore(settings.collector_dir)

    print("\nChronos Activity Tracker: collector setup\n")
    print(f"1. Sign in at {settings.server_url} with Google or GitHub")
    print("2. Open 'Get Sync Token' in your dashboard and copy the token")
    print(f"3. Paste it below (it will be stored in {store.path})\n")

    if store.has_token():
        print("An existing token was found.")
        overwrite = input("Replace it with a new one? [y/N] ").strip().lower()
        if overwrite != "y":
            print("Setup cancelled. Existing token unchanged.")
            sys.exit(0)

    token = input("Enter your sync token: ").strip()
    if not token:
        print("Error: token cannot be empty.")
        sys.exit(1)

    store.save(token)
    print(f"\nToken saved to {store.path}")
    print("Start collecting with:  python -m chronos collect\n")


if __name__ == "__main__":
    run_setup()
