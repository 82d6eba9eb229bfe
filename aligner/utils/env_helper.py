"""
Utility to help users configure the .env file
"""
import os
import shutil
from pathlib import Path

from aligner.config import AlignerConfig


def _get_config_dir():
    """Get directory for configuration files"""
    return Path.cwd()


def create_env_from_template(force: bool = False) -> bool:
    """
    Create .env file from .env.example template

    Args:
        force: If True, overwrites existing .env file

    Returns:
        bool: True if file was created, False otherwise
    """
    config_dir = _get_config_dir()
    env_file = config_dir / '.env'
    env_example = config_dir / '.env.example'

    if env_file.exists() and not force:
        print(f"❌ .env file already exists at: {env_file.absolute()}")
        print("   Use force=True to overwrite")
        return False

    if not env_example.exists():
        print("❌ Template file .env.example not found")
        return False

    try:
        shutil.copy(env_example, env_file)
    except OSError as e:
        print(f"❌ Failed to create .env: {e}")
        return False

    print("✅ Created .env from template")
    print(f"   Location: {env_file.absolute()}")
    return True


def validate_env_config(verbose: bool = True) -> dict:
    """
    Validate current environment configuration and return status

    Args:
        verbose: If True, prints detailed information

    Returns:
        dict: Status information about configuration
    """
    from dotenv import load_dotenv
    load_dotenv(_get_config_dir() / '.env')

    config = AlignerConfig.from_env()
    status = {
        'env_exists': (_get_config_dir() / '.env').exists(),
        'issues': config.validate(),
        'warnings': [],
        'config': {
            'model': config.model,
            'port': config.port,
            'host': config.host,
            'api_key_set': bool(config.gemini_api_key),
            'export_dir': config.export_dir,
        }
    }

    if os.getenv('API_KEY') and os.getenv('GEMINI_API_KEY') and os.getenv('API_KEY') != os.getenv('GEMINI_API_KEY'):
        status['warnings'].append("Both API_KEY and GEMINI_API_KEY are set; API_KEY is used")
    if config.host == '0.0.0.0':
        status['warnings'].append("Server binds to all network interfaces (HOST=0.0.0.0)")

    if verbose:
        print("\n" + "="*70)
        print("🔍 CONFIGURATION VALIDATION")
        print("="*70)
        print(f"\n📁 .env file exists: {'✅ Yes' if status['env_exists'] else '❌ No (using environment only)'}")
        print("\n⚙️  Current Configuration:")
        print(f"   • Model: {config.model}")
        print(f"   • API key: {'set' if config.gemini_api_key else 'NOT SET'}")
        print(f"   • Interface: http://{config.host}:{config.port}")
        print(f"   • Export archive: {config.export_dir or '(disabled)'}")

        if status['issues']:
            print("\n❌ CRITICAL ISSUES:")
            for issue in status['issues']:
                print(f"   • {issue}")

        if status['warnings']:
            print("\n⚠️  WARNINGS:")
            for warning in status['warnings']:
                print(f"   • {warning}")

        if not status['issues'] and not status['warnings']:
            print("\n✅ Configuration looks good!")

        print("="*70 + "\n")

    return status


def interactive_env_setup():
    """
    Interactive setup wizard for .env configuration
    """
    print("\n" + "="*70)
    print("🛠️  INTERACTIVE .ENV SETUP WIZARD")
    print("="*70)

    env_file = _get_config_dir() / '.env'

    if env_file.exists():
        response = input("\n.env file already exists. Overwrite? (yes/no): ").strip().lower()
        if response != 'yes':
            print("❌ Setup cancelled")
            return

    print("\n📋 Please provide the following information:")
    print("   (Press Enter to use default values shown in brackets)\n")

    api_key = input("1️⃣  Gemini API Key: ").strip()
    model = input("2️⃣  Gemini Model [gemini-2.5-flash]: ").strip() or 'gemini-2.5-flash'
    port = input("3️⃣  Web server port [5000]: ").strip() or '5000'

    try:
        with open(env_file, 'w', encoding='utf-8') as f:
            f.write("# Gemini\n")
            f.write(f"API_KEY={api_key}\n")
            f.write(f"GEMINI_MODEL={model}\n")
            f.write("REQUEST_TIMEOUT=120\n")
            f.write("\n# Server Configuration\n")
            f.write(f"PORT={port}\n")
            f.write("HOST=127.0.0.1\n")
            f.write("\n# Optional archive of exported documents\n")
            f.write("EXPORT_DIR=\n")
    except OSError as e:
        print(f"\n❌ Failed to create .env file: {e}\n")
        return

    print("\n✅ .env file created successfully!")
    print(f"   Location: {env_file.absolute()}")
    if not api_key:
        print("\n⚠️  No API key entered: the server will refuse to start until API_KEY is set.\n")


if __name__ == '__main__':
    """Allow running this script standalone for configuration"""
    import sys

    if len(sys.argv) > 1:
        command = sys.argv[1]

        if command == 'create':
            create_env_from_template()
        elif command == 'validate':
            status = validate_env_config()
            sys.exit(1 if status['issues'] else 0)
        elif command == 'setup':
            interactive_env_setup()
        else:
            print(f"Unknown command: {command}")
            print("Available commands: create, validate, setup")
    else:
        print("\nUsage:")
        print("  python -m aligner.utils.env_helper create   - Create .env from template")
        print("  python -m aligner.utils.env_helper validate - Check current configuration")
        print("  python -m aligner.utils.env_helper setup    - Interactive setup wizard")
