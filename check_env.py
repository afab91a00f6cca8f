#!/usr/bin/env python3
"""Helper script to check the .env file and the resolved DriveLess configuration."""

from pathlib import Path
import sys

TEMPLATE = """# Record store: memory, file or supabase
DRIVELESS_STORE_BACKEND=file
DRIVELESS_DATA_ROOT=./data

# Caller identity: header (X-DriveLess-User) or supabase (Bearer access token)
DRIVELESS_IDENTITY_BACKEND=header

# Shared admin passphrase. Leave empty to disable admin login.
DRIVELESS_ADMIN_PASSPHRASE=
DRIVELESS_ALLOW_ANONYMOUS_ADMIN=true

# Supabase (required for the supabase store or identity backend)
# Get these from: https://supabase.com/dashboard → Your Project → Settings → API
DRIVELESS_SUPABASE_URL=
DRIVELESS_SUPABASE_KEY=
"""


def _mask(value: str | None) -> str:
    if not value:
        return "<not set>"
    return value[:6] + "..." if len(value) > 10 else "***"


def main() -> int:
    project_root = Path(__file__).parent
    env_file = project_root / ".env"

    if not env_file.exists():
        env_file.write_text(TEMPLATE, encoding="utf-8")
        print(f"Created template .env file at: {env_file}")
        print("Edit it and run this script again.")
        return 1

    sys.path.insert(0, str(project_root / "src"))
    try:
        from driveless.config import Settings

        config = Settings()
    except Exception as e:
        print(f"Error loading config: {e}")
        return 1

    print(f"store_backend      = {config.store_backend}")
    print(f"store_path         = {config.store_path}")
    print(f"identity_backend   = {config.identity_backend}")
    print(f"admin_passphrase   = {_mask(config.admin_passphrase)}")
    print(f"supabase_url       = {config.supabase_url or '<not set>'}")
    print(f"supabase_key       = {_mask(config.supabase_key)}")

    needs_supabase = "supabase" in (config.store_backend, config.identity_backend)
    if needs_supabase and not (config.supabase_url and config.supabase_key):
        print("ERROR: Supabase backend selected but DRIVELESS_SUPABASE_URL / DRIVELESS_SUPABASE_KEY are missing")
        return 1
    if not config.admin_passphrase:
        print("WARNING: DRIVELESS_ADMIN_PASSPHRASE is empty, admin login is disabled")
    print("Configuration OK")
    return 0


if __name__ == "__main__":
    sys.exit(main())
