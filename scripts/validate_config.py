#!/usr/bin/env python3
"""Configuration validation script."""

import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from tradelog_app.config.loader import ConfigLoader
from tradelog_app.config.validation import ConfigValidator


def main():
    """Main validation function."""
    config_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    loader = ConfigLoader.create(config_dir)
    print(f"🔍 Validating {loader.config_dir / 'tradelog.yaml'}...")

    try:
        config = loader.merge_config()
    except Exception as e:
        print(f"❌ Error loading configuration: {e}")
        sys.exit(1)

    errors = ConfigValidator.validate_config(config)
    if errors:
        print(f"❌ Found {len(errors)} validation errors:")
        for error in errors:
            print(f"  • {error.field}: {error.message} (value: {error.value})")
        sys.exit(1)

    typed = loader.load()
    print(f"✅ Configuration is valid")
    print(f"   Default market: {typed.form.default_market}")
    print(f"   Strategy load limit: {typed.strategy.load_limit}")
    print(f"   Sync channel: {typed.sync.event_channel} / {typed.sync.storage_key}")


if __name__ == "__main__":
    main()
