#!/usr/bin/env python3
"""Configuration validation script."""

import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from hts_app.config.loader import ConfigLoader
from hts_app.config.validation import ConfigValidator


def main():
    """Main validation function."""
    print("🔍 Validating HTS App configuration...")

    config = ConfigLoader.create().merge_config()
    errors = ConfigValidator.validate_config(config)

    webhook = config.get("webhook", {})
    print(f"  webhook.url        : {webhook.get('url') or '(not set)'}")
    print(f"  webhook.bypass_mode: {webhook.get('bypass_mode')}")
    print(f"  store.db_path      : {config.get('store', {}).get('db_path')}")

    if errors:
        print(f"\n❌ Found {len(errors)} validation errors:")
        for error in errors:
            print(f"  • {error.field}: {error.message} (value: {error.value!r})")
        sys.exit(1)

    print("\n🎉 Configuration validation passed!")
    sys.exit(0)


if __name__ == "__main__":
    main()
