#!/usr/bin/env python3
"""Configuration validation script."""

import argparse
import sys
from pathlib import Path
from typing import Optional

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from pacer_app.config.loader import CONFIG_FILENAME, ConfigLoader
from pacer_app.config.validation import ConfigValidator, ValidationIssue


def validate_config_dir(config_dir: Optional[Path]) -> list[ValidationIssue]:
    """Validate the merged configuration for a config directory."""
    loader = ConfigLoader.create(config_dir)
    config = loader.merge_config()
    return ConfigValidator.validate_config(config)


def main():
    """Main validation function."""
    parser = argparse.ArgumentParser(description="Validate Pacer configuration")
    parser.add_argument(
        "--config-dir",
        type=Path,
        default=None,
        help=f"Directory containing {CONFIG_FILENAME} (default: repository config/)"
    )
    args = parser.parse_args()

    loader = ConfigLoader.create(args.config_dir)
    print(f"🔍 Validating Pacer configuration in {loader.config_dir}...")

    all_valid = True

    try:
        errors = validate_config_dir(args.config_dir)

        if errors:
            print(f"❌ Found {len(errors)} validation errors:")
            for error in errors:
                print(f"  • {error.field}: {error.message} (value: {error.value})")
            all_valid = False
        else:
            print("✅ File configuration is valid")

    except Exception as e:
        print(f"❌ Error loading configuration: {e}")
        all_valid = False

    # Test explicit overrides on top of the file
    print("\n📋 Testing explicit overrides...")
    test_overrides = {
        "scheduler": {"warning_window_seconds": 10.0},
        "delivery": {"speed_unit": "mph"},
    }

    try:
        config = loader.merge_config(test_overrides)
        errors = ConfigValidator.validate_config(config)

        if errors:
            print("❌ Override validation failed:")
            for error in errors:
                print(f"  • {error.field}: {error.message}")
            all_valid = False
        else:
            print("✅ Override validation passed")

    except Exception as e:
        print(f"❌ Error testing overrides: {e}")
        all_valid = False

    if all_valid:
        print("\n🎉 All configuration validation passed!")
        sys.exit(0)
    else:
        print("\n❌ Configuration validation failed!")
        sys.exit(1)


if __name__ == "__main__":
    main()
