"""
Allow running the package with: python -m finch

Examples:
    python -m finch -k KEY                  # Upgrade the current directory
    python -m finch /path/to/photos -k KEY  # Upgrade a specific directory
    python -m finch config                  # Show configuration
    python -m finch config --init           # Create example config file
"""

import sys


def show_config() -> int:
    from .user_config import get_user_config

    config = get_user_config()

    if '--init' in sys.argv or '-i' in sys.argv:
        if config.create_example_config():
            print("Created example configuration file at:")
            print(f"  {config.config_file_path}")
            print("\nEdit this file to customize Finch settings.")
            return 0
        print("Failed to create configuration file.")
        return 1

    print(f"Configuration file: {config.config_file_path}")
    if config.config_file_path.exists():
        print("Status: found")
    else:
        print("Status: not found (using defaults)")
        print("\nRun 'python -m finch config --init' to create one.")

    print("\nCurrent settings:")
    print(f"  api_key: {'set' if config.api_key else 'not set'}")
    print(f"  default_tolerance: {config.default_tolerance}")
    print(f"  default_workers: {config.default_workers}")
    print(f"  request_timeout: {config.request_timeout}")
    return 0


def main():
    if len(sys.argv) > 1 and sys.argv[1] == 'config':
        sys.argv.pop(1)
        sys.exit(show_config())

    from .cli import main as cli_main
    sys.exit(cli_main())


if __name__ == '__main__':
    main()
