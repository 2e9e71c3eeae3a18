#!/usr/bin/env python3
"""
Deployment diagnostics
Checks environment configuration and that the Supabase backend answers
"""

import sys
from typing import Optional

from supabase import create_client

from social_analytics.config import Settings, load_settings


def mask_secret(value: str) -> str:
    if len(value) > 20:
        return value[:10] + "..." + value[-10:]
    return value[:5] + "***"


def diagnose_environment(settings: Settings) -> bool:
    """Check environment variables"""
    print("🔧 ENVIRONMENT VARIABLE DIAGNOSIS")
    print("=" * 50)

    print(f"{'✅' if settings.supabase_url else '❌'} SUPABASE_URL: {settings.supabase_url or 'NOT SET'}")
    if settings.supabase_anon_key:
        print(f"✅ SUPABASE_ANON_KEY: {mask_secret(settings.supabase_anon_key)}")
    else:
        print("❌ SUPABASE_ANON_KEY: NOT SET")
    print(f"ℹ️ SITE_URL: {settings.resolved_site_url}")
    print(f"ℹ️ APP_ENV: {settings.app_env}")

    problems = settings.validate_environment()
    for problem in problems:
        print(f"❌ {problem}")

    return not problems


def diagnose_database(settings: Settings) -> bool:
    """Test the database connection with the public key"""
    print("\n🗄️ DATABASE CONNECTION DIAGNOSIS")
    print("=" * 50)

    try:
        supabase = create_client(settings.supabase_url, settings.supabase_anon_key)
        print("✅ Supabase client initialized")

        # Row level security hides every row from an anonymous caller, so an
        # empty result still proves the table is reachable
        response = supabase.table("posts").select("id").limit(1).execute()
        print(f"✅ Database connection successful - visible posts: {len(response.data or [])}")
        return True
    except Exception as e:
        print(f"❌ Database diagnosis failed: {e}")
        return False


def main(settings: Optional[Settings] = None) -> int:
    settings = settings or load_settings()

    env_ok = diagnose_environment(settings)
    if not env_ok:
        print("\n❌ Fix the environment before checking the database")
        return 1

    db_ok = diagnose_database(settings)
    print("\n" + ("✅ All checks passed" if db_ok else "❌ Some checks failed"))
    return 0 if db_ok else 1


if __name__ == "__main__":
    sys.exit(main())
