"""
Check the connection to the spreadsheet endpoint.

Reads products, customers and sales straight from the remote store (no mock
fallback) and optionally adds a test product.

Usage:
    python scripts/check_api.py
    python scripts/check_api.py --url https://script.google.com/macros/s/.../exec --add-test-product
"""

import argparse
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from domain.actions import Action
from repositories.client import create_http_client, load_settings
from repositories.remote_store import RemoteStore, RemoteStoreError

TEST_PRODUCT = {
    "name": "Test Product",
    "category": "Accessories",
    "price": 100,
    "stock": 10,
}


def check_api(store: RemoteStore, add_test_product: bool) -> bool:
    ok = True
    for action, key in (
        (Action.GET_PRODUCTS, "products"),
        (Action.GET_CUSTOMERS, "customers"),
        (Action.GET_SALES, "sales"),
    ):
        try:
            response = store.execute(action)
        except RemoteStoreError as e:
            print(f"[FAIL] {action.value}: {e}")
            ok = False
            continue

        if "error" in response:
            print(f"[FAIL] {action.value}: {response['error']}")
            ok = False
        else:
            print(f"[OK]   {action.value}: {len(response.get(key) or [])} {key}")

    if add_test_product:
        try:
            response = store.execute(Action.ADD_PRODUCT, TEST_PRODUCT)
        except RemoteStoreError as e:
            print(f"[FAIL] addProduct: {e}")
            return False
        if "error" in response:
            print(f"[FAIL] addProduct: {response['error']}")
            return False
        print(f"[OK]   addProduct: id {response.get('id')}")

    return ok


def main() -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(description="Check the Vyapar Pro spreadsheet endpoint")
    parser.add_argument("--url", help="Endpoint URL (default: VYAPAR_API_URL)")
    parser.add_argument(
        "--add-test-product",
        action="store_true",
        help="Also add a 'Test Product' row to verify writes",
    )
    args = parser.parse_args()

    settings = load_settings()
    url = args.url or settings.api_url
    with create_http_client(settings) as client:
        try:
            store = RemoteStore(url, client=client)
        except RuntimeError as e:
            print(f"[FAIL] {e}")
            return 1

        print("=" * 50)
        print(f"Checking {url}")
        print("=" * 50)
        ok = check_api(store, args.add_test_product)

    print("=" * 50)
    print("All checks passed." if ok else "Some checks failed.")
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
