"""
Supabase 마이그레이션 실행 스크립트

Supabase Python 클라이언트는 직접 SQL 실행을 지원하지 않으므로
테이블 존재 여부를 확인하고, 없으면 Dashboard에서 실행할 SQL을 출력한다.
"""
import sys
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger
from supabase import Client, create_client

from app.config import get_settings

load_dotenv()

MIGRATION_FILE = Path(__file__).parent / "migrations" / "001_tier_list.sql"
REQUIRED_TABLES = ("players", "tier_orders")


def missing_tables(client: Client) -> list:
    """존재하지 않는 테이블 목록"""
    missing = []
    for table in REQUIRED_TABLES:
        try:
            client.table(table).select("*").limit(1).execute()
            logger.info(f"✅ {table} 테이블이 이미 존재합니다")
        except Exception as e:
            if "does not exist" in str(e) or "relation" in str(e).lower():
                logger.info(f"{table} 테이블이 없습니다. 생성이 필요합니다.")
                missing.append(table)
            else:
                logger.error(f"{table} 테이블 확인 중 오류: {e}")
                raise
    return missing


def run_migration() -> bool:
    """마이그레이션 SQL 안내"""
    settings = get_settings()
    if not settings.supabase_url or not settings.supabase_key:
        logger.error("SUPABASE_URL과 SUPABASE_KEY를 설정해주세요")
        return False

    if not MIGRATION_FILE.exists():
        logger.error(f"마이그레이션 파일을 찾을 수 없습니다: {MIGRATION_FILE}")
        return False

    client: Client = create_client(settings.supabase_url, settings.supabase_key)
    if not missing_tables(client):
        return True

    sql_content = MIGRATION_FILE.read_text(encoding="utf-8")

    logger.info("=" * 60)
    logger.info("Supabase Dashboard에서 아래 SQL을 실행해주세요:")
    logger.info("1. https://supabase.com/dashboard 접속")
    logger.info("2. 프로젝트 선택 → SQL Editor")
    logger.info("3. 아래 SQL 복사하여 실행")
    logger.info("=" * 60)
    print("\n" + sql_content + "\n")
    return True


if __name__ == "__main__":
    logger.remove()
    logger.add(sys.stdout, format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}")
    sys.exit(0 if run_migration() else 1)
