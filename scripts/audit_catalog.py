"""
Catalog Audit Script

Loads every product through the admin API, merges each stored option map
against its category schema and reports the groups a save would reject
(no default, several defaults). Prints a per-category summary with pandas.

Run from project root: python scripts/audit_catalog.py --username admin --password admin

Author: Khalil_Bannouri
Version: 1.0.0
"""

import argparse
import asyncio
import os
import sys
from datetime import datetime

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pandas as pd

from storefront.core.config import get_settings, setup_logging
from storefront.options.editor import OptionEditor
from storefront.options.merger import parse_options
from storefront.pricing import compute_final_price, initial_selections
from storefront.services.admin import AdminSession


def audit_rows(products) -> list[dict]:
    """One row per product with its option health."""
    rows = []
    for product in products:
        editor = OptionEditor.for_product(product)
        issues = editor.validate()
        options = parse_options(product.options, product.category)
        opening_price = compute_final_price(product.price, options, initial_selections(options))
        rows.append({
            "id": product.id,
            "name": product.name,
            "category": product.category.value,
            "published": product.published,
            "out_of_stock": product.out_of_stock,
            "price": product.price,
            "opening_price": opening_price,
            "enabled_groups": sum(1 for g in options.values() if g.enabled),
            "issues": "; ".join(f"{i.key}: {i.message}" for i in issues),
        })
    return rows


async def audit_catalog(username: str, password: str) -> bool:
    settings = get_settings()

    print("=" * 60)
    print("CATALOG AUDIT REPORT")
    print("=" * 60)
    print(f"Timestamp: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print(f"Environment: {settings.env_mode.value}")
    print("=" * 60)

    admin = AdminSession()
    login = await admin.login(username, password)
    if not login.success:
        print(f"\nLogin failed: {login.error_message}")
        return False

    loaded = await admin.load_products()
    if not loaded.success:
        print(f"\nCould not load products: {loaded.error_message}")
        return False

    df = pd.DataFrame(audit_rows(admin.products))
    if df.empty:
        print("\nCatalog is empty.")
        return True

    print("\nSTATISTICS:")
    print(f"   Products: {len(df)}")
    print(f"   Published: {int(df['published'].sum())}")
    print(f"   Out of stock: {int(df['out_of_stock'].sum())}")

    print("\nBY CATEGORY:")
    summary = df.groupby("category").agg(
        products=("id", "count"),
        avg_price=("price", "mean"),
        max_opening_price=("opening_price", "max"),
    )
    print(summary.to_string())

    duplicates = df["name"].duplicated().sum()
    if duplicates > 0:
        print(f"\n{duplicates} duplicate product names found")

    broken = df[df["issues"] != ""]
    if broken.empty:
        print("\nAll option maps are valid")
    else:
        print(f"\n{len(broken)} products need attention:")
        print("-" * 60)
        print(broken[["id", "name", "issues"]].to_string(index=False))

    print("\n" + "=" * 60)
    print("AUDIT COMPLETE")
    print("=" * 60)
    return broken.empty


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Catalog Audit Script")
    parser.add_argument("--username", default=os.getenv("ADMIN_USERNAME", "admin"))
    parser.add_argument("--password", default=os.getenv("ADMIN_PASSWORD", "admin"))
    args = parser.parse_args()

    setup_logging()
    ok = asyncio.run(audit_catalog(args.username, args.password))
    sys.exit(0 if ok else 1)
