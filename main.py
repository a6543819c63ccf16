"""
PvP 티어리스트 메인

serve: API 서버 실행
tiers / leaderboard / score: 설정된 저장소로 조회
"""
import argparse
import asyncio
import sys
from typing import List, Optional

from loguru import logger

from app.config import get_settings
from app.dependencies import build_service
from app.service import TierListService
from ranking.tiers import GameMode, TierLevel, display_name


def setup_logging(level: str = "INFO") -> None:
    """로깅 설정 (콘솔 + 일별 파일)"""
    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=level.upper()
    )
    logger.add(
        "logs/tierlist_{time:YYYY-MM-DD}.log",
        rotation="1 day",
        retention="30 days",
        level="DEBUG"
    )


async def print_tiers(service: TierListService, mode: str) -> None:
    snapshot = await service.tier_list(mode)
    print(f"\n=== {snapshot.game_mode.value} 티어리스트 ===")
    for level in TierLevel:
        players = snapshot.buckets[level]
        print(f"\n[{level.key}] ({len(players)}명, v{snapshot.versions.get(level, 0)})")
        for position, player in enumerate(players, 1):
            placement = service.classifier.placement(player, snapshot.game_mode)
            label = display_name(placement.code) if placement and placement.code else ""
            points = service.scoring.total_points(player)
            print(f"  {position:>2}. {player.name:<20} {label:<8} {points}pt")


async def print_leaderboard(service: TierListService) -> None:
    print("\n=== Overall 리더보드 ===")
    for entry in await service.leaderboard():
        print(f"  {entry.rank:>2}. {entry.name:<20} {entry.points:>4}pt  {entry.title:<12} {entry.overall_tier}")


async def print_score(service: TierListService, name: str) -> bool:
    player = await service.repository.get_player_by_name(name)
    if player is None:
        logger.error(f"선수를 찾을 수 없습니다: {name}")
        return False
    score = service.compute_score(player)
    print(f"\n=== {player.name} ===")
    for mode in GameMode:
        if not mode.is_overall:
            print(f"  {mode.value:<10} {player.tier_for(mode)}")
    print(f"  포인트: {score.points}, 칭호: {score.title}, overall: {score.overall_tier}")
    return True


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Minecraft PvP 티어리스트")
    parser.add_argument("--log-level", default=None, help="로그 레벨 (기본: LOG_LEVEL 설정)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="API 서버 실행")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)
    serve.add_argument("--reload", action="store_true", help="코드 변경 시 자동 재시작")

    tiers = subparsers.add_parser("tiers", help="게임 모드별 티어리스트 출력")
    tiers.add_argument("mode", choices=[m.value for m in GameMode])

    subparsers.add_parser("leaderboard", help="overall 리더보드 출력")

    score = subparsers.add_parser("score", help="선수 점수 출력")
    score.add_argument("name")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """메인 함수"""
    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(args.log_level or settings.log_level)

    if args.command == "serve":
        import uvicorn

        uvicorn.run(
            "app.server:app",
            host=args.host or settings.host,
            port=args.port or settings.port,
            reload=args.reload,
        )
        return 0

    service = build_service(settings)

    if args.command == "tiers":
        asyncio.run(print_tiers(service, args.mode))
    elif args.command == "leaderboard":
        asyncio.run(print_leaderboard(service))
    elif args.command == "score":
        if not asyncio.run(print_score(service, args.name)):
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
